"""
/companies routes

    pytest tests/test_companies_routes.py -v
"""
from decimal import Decimal
from unittest.mock import patch

import pytest
from psycopg2.errors import UniqueViolation

from jobly.exceptions import BadRequestError, NotFoundError


@pytest.fixture
def mock_companies_data():
    return [
        {"handle": "c1", "name": "C1", "description": "Desc1", "numEmployees": 1, "logoUrl": "http://c1.img"},
        {"handle": "c2", "name": "C2", "description": "Desc2", "numEmployees": 2, "logoUrl": "http://c2.img"},
        {"handle": "c3", "name": "C3", "description": "Desc3", "numEmployees": 3, "logoUrl": None},
    ]


NEW_COMPANY = {
    "handle": "new",
    "name": "New",
    "logoUrl": "http://new.img",
    "description": "DescNew",
    "numEmployees": 10,
}


class TestListCompanies:
    """GET /companies"""

    def test_ok_for_anon(self, client, mock_companies_data):
        with patch("jobly.models.company.find_all", return_value=mock_companies_data) as mock_find:
            response = client.get("/companies")

        assert response.status_code == 200
        assert response.json() == {"companies": mock_companies_data}
        mock_find.assert_called_once_with({"name_like": None, "min_employees": None, "max_employees": None})

    def test_filters_are_passed(self, client, mock_companies_data):
        with patch("jobly.models.company.find_all", return_value=mock_companies_data[1:2]) as mock_find:
            response = client.get("/companies?nameLike=c&minEmployees=2&maxEmployees=2")

        assert response.json() == {"companies": mock_companies_data[1:2]}
        mock_find.assert_called_once_with({"name_like": "c", "min_employees": 2, "max_employees": 2})

    def test_min_greater_than_max(self, client):
        with patch("jobly.db.fetch_all") as mock_fetch:
            response = client.get("/companies?minEmployees=3&maxEmployees=1")

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "minEmployees cannot be greater than maxEmployees"
        mock_fetch.assert_not_called()

    def test_non_number_filter(self, client):
        response = client.get("/companies?maxEmployees=lots")
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "maxEmployees must be a number"


class TestGetCompany:
    """GET /companies/{handle}"""

    def test_works_for_anon(self, client, mock_companies_data):
        company = {
            **mock_companies_data[0],
            "jobs": [{"id": 1, "title": "J1", "salary": 1, "equity": Decimal("0.1")}],
        }
        with patch("jobly.models.company.get", return_value=company):
            response = client.get("/companies/c1")

        assert response.json() == {
            "company": {
                **mock_companies_data[0],
                "jobs": [{"id": 1, "title": "J1", "salary": 1, "equity": "0.1"}],
            }
        }

    def test_not_found(self, client):
        with patch("jobly.models.company.get", side_effect=NotFoundError("No company: nope")):
            response = client.get("/companies/nope")
        assert response.status_code == 404


class TestCreateCompany:
    """POST /companies"""

    def test_ok_for_admins(self, client, a1_headers):
        with patch("jobly.models.company.create", return_value=NEW_COMPANY) as mock_create:
            response = client.post("/companies", json=NEW_COMPANY, headers=a1_headers)

        assert response.status_code == 201
        assert response.json() == {"company": NEW_COMPANY}
        mock_create.assert_called_once_with(NEW_COMPANY)

    def test_unauth_for_non_admin(self, client, u1_headers):
        response = client.post("/companies", json=NEW_COMPANY, headers=u1_headers)
        assert response.status_code == 401

    def test_missing_data(self, client, a1_headers):
        response = client.post("/companies", json={"handle": "new", "numEmployees": 10}, headers=a1_headers)
        assert response.status_code == 400

    def test_invalid_url(self, client, a1_headers):
        response = client.post("/companies", json={**NEW_COMPANY, "logoUrl": "not-a-url"}, headers=a1_headers)
        assert response.status_code == 400

    def test_duplicate(self, client, a1_headers):
        with patch("jobly.models.company.create", side_effect=BadRequestError("Duplicate company: new")):
            response = client.post("/companies", json=NEW_COMPANY, headers=a1_headers)
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Duplicate company: new"

    def test_name_already_taken(self, client, a1_headers):
        err = UniqueViolation('duplicate key value violates unique constraint "companies_name_key"')
        with patch("jobly.db.fetch_one", return_value=None), \
                patch("jobly.db.execute_returning", side_effect=err):
            response = client.post("/companies", json={**NEW_COMPANY, "name": "C1"}, headers=a1_headers)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Duplicate company: new (C1)"


class TestUpdateCompany:
    """PATCH /companies/{handle}"""

    def test_works_for_admins(self, client, a1_headers, mock_companies_data):
        updated = {**mock_companies_data[0], "name": "C1-new"}
        with patch("jobly.models.company.update", return_value=updated) as mock_update:
            response = client.patch("/companies/c1", json={"name": "C1-new"}, headers=a1_headers)

        assert response.json() == {"company": updated}
        mock_update.assert_called_once_with("c1", {"name": "C1-new"})

    def test_camel_case_fields_reach_the_model(self, client, a1_headers, mock_companies_data):
        with patch("jobly.db.execute_returning", return_value=mock_companies_data[0]) as mock_update:
            response = client.patch(
                "/companies/c1", json={"numEmployees": 5, "logoUrl": None}, headers=a1_headers
            )

        assert response.status_code == 200
        sql, values = mock_update.call_args[0]
        assert 'SET "num_employees"=$1, "logo_url"=$2 WHERE handle = $3' in sql
        assert values == [5, None, "c1"]

    def test_unauth_for_anon(self, client):
        response = client.patch("/companies/c1", json={"name": "C1-new"})
        assert response.status_code == 401

    def test_handle_change_attempt(self, client, a1_headers):
        response = client.patch("/companies/c1", json={"handle": "c1-new"}, headers=a1_headers)
        assert response.status_code == 400

    def test_not_found(self, client, a1_headers):
        with patch("jobly.models.company.update", side_effect=NotFoundError("No company: nope")):
            response = client.patch("/companies/nope", json={"name": "new nope"}, headers=a1_headers)
        assert response.status_code == 404

    def test_rename_to_taken_name(self, client, a1_headers):
        err = UniqueViolation('duplicate key value violates unique constraint "companies_name_key"')
        with patch("jobly.db.execute_returning", side_effect=err):
            response = client.patch("/companies/c2", json={"name": "C1"}, headers=a1_headers)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Duplicate company name: C1"


class TestDeleteCompany:
    """DELETE /companies/{handle}"""

    def test_works_for_admins(self, client, a1_headers):
        with patch("jobly.models.company.remove") as mock_remove:
            response = client.delete("/companies/c1", headers=a1_headers)

        assert response.json() == {"deleted": "c1"}
        mock_remove.assert_called_once_with("c1")

    def test_unauth_for_non_admin(self, client, u1_headers):
        response = client.delete("/companies/c1", headers=u1_headers)
        assert response.status_code == 401
