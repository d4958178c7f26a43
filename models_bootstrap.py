# models_bootstrap.py
from user import models as _user_models
from outofoffice import models as _outofoffice_models
