import unittest
from types import SimpleNamespace as Obj
from unittest.mock import patch
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user


class OutOfOfficeRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        self.user = Obj(id=123, email="alice@example.com", username="alice", locale="en")
        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_current_active_user] = lambda: self.user

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)

    # --- LIST ---

    @patch("outofoffice.router.service.list_out_of_office")
    def test_list_out_of_office_happy_path(self, mock_list):
        mock_list.return_value = [
            Obj(id=2, uuid="b-uid", start="2030-02-01T00:00:00+00:00", end="2030-02-05T23:59:59.999999+00:00",
                to_user_id=7, to_user=Obj(username="bob")),
            Obj(id=1, uuid="a-uid", start="2030-01-10T00:00:00+00:00", end="2030-01-15T23:59:59.999999+00:00",
                to_user_id=None, to_user=None),
        ]
        resp = self.client.get("/api/out-of-office")
        self.assertEqual(resp.status_code, 200, resp.text)
        data = resp.json()
        self.assertEqual(len(data), 2)
        self.assertEqual(data[0]["uuid"], "b-uid")
        self.assertEqual(data[0]["to_user"], {"username": "bob"})
        self.assertIsNone(data[1]["to_user"])
        self.assertEqual(mock_list.call_args.kwargs["user_id"], 123)

    @patch("outofoffice.router.service.list_out_of_office")
    def test_list_out_of_office_naive_datetimes_reported_as_utc(self, mock_list):
        mock_list.return_value = [
            Obj(id=1, uuid="a-uid", start="2030-01-10T00:00:00", end="2030-01-15T23:59:59",
                to_user_id=None, to_user=None),
        ]
        resp = self.client.get("/api/out-of-office")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()[0]["start"], "2030-01-10T00:00:00Z")

    # --- POST ---

    @patch("outofoffice.router.service.create_out_of_office")
    def test_create_out_of_office_201(self, mock_create):
        mock_create.return_value = Obj(id=1, uuid="new-uid")
        resp = self.client.post(
            "/api/out-of-office",
            json={"start_date": "2030-01-10", "end_date": "2030-01-15", "to_team_user_id": 7},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json(), {})

        kwargs = mock_create.call_args.kwargs
        self.assertIs(kwargs["user"], self.user)
        self.assertEqual(str(kwargs["payload"].start_date), "2030-01-10")
        self.assertEqual(kwargs["payload"].to_team_user_id, 7)

    @patch("outofoffice.router.service.create_out_of_office")
    def test_create_out_of_office_400_from_service(self, mock_create):
        mock_create.side_effect = HTTPException(status_code=400, detail="start_date_must_be_before_end_date")
        resp = self.client.post(
            "/api/out-of-office",
            json={"start_date": "2030-01-15", "end_date": "2030-01-10"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "start_date_must_be_before_end_date")

    @patch("outofoffice.router.service.create_out_of_office")
    def test_create_out_of_office_409_conflict(self, mock_create):
        mock_create.side_effect = HTTPException(status_code=409, detail="out_of_office_entry_already_exists")
        resp = self.client.post(
            "/api/out-of-office",
            json={"start_date": "2030-01-12", "end_date": "2030-01-20"},
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["detail"], "out_of_office_entry_already_exists")

    @patch("outofoffice.router.service.create_out_of_office")
    def test_create_out_of_office_409_integrity_error(self, mock_create):
        mock_create.side_effect = IntegrityError("stmt", "params", Exception("dup"))
        resp = self.client.post(
            "/api/out-of-office",
            json={"start_date": "2030-01-12", "end_date": "2030-01-20"},
        )
        self.assertEqual(resp.status_code, 409, resp.text)
        self.assertEqual(resp.json()["detail"], "out_of_office_entry_already_exists")

    def test_create_out_of_office_422_bad_date(self):
        resp = self.client.post(
            "/api/out-of-office",
            json={"start_date": "not-a-date", "end_date": "2030-01-20"},
        )
        self.assertEqual(resp.status_code, 422, resp.text)

    def test_create_out_of_office_422_unknown_field(self):
        resp = self.client.post(
            "/api/out-of-office",
            json={"start_date": "2030-01-10", "end_date": "2030-01-20", "reason": "holiday"},
        )
        self.assertEqual(resp.status_code, 422, resp.text)

    # --- DELETE /{uid} ---

    @patch("outofoffice.router.service.delete_out_of_office")
    def test_delete_out_of_office_200(self, mock_delete):
        mock_delete.return_value = None
        resp = self.client.delete("/api/out-of-office/abc-uid")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json(), {})
        self.assertEqual(mock_delete.call_args.kwargs, {"user_id": 123, "out_of_office_uid": "abc-uid"})

    @patch("outofoffice.router.service.delete_out_of_office")
    def test_delete_out_of_office_404(self, mock_delete):
        mock_delete.side_effect = HTTPException(status_code=404, detail="booking_redirect_not_found")
        resp = self.client.delete("/api/out-of-office/missing")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"], "booking_redirect_not_found")

    # --- auth ---

    def test_requires_authentication(self):
        app.dependency_overrides.pop(get_current_active_user, None)
        resp = self.client.get("/api/out-of-office")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"], "Not authenticated")


if __name__ == "__main__":
    unittest.main()
