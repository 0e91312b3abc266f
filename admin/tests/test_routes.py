"""
Tests for the server-rendered pages (api/*)

Drives the FastAPI app with TestClient against the in-memory backend:
navigation, create/delete post/redirect/get flows, the contacts filter,
the theme toggle and the health probe.
"""
import asyncio
import threading
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from crm_admin import main as main_module
from crm_admin.core.config import Settings
from crm_admin.main import create_app
from crm_admin.services.theme import ThemeState

from tests.fixtures.crm_fixtures import FakeCrmBackend, make_client, seeded_backend


@pytest.fixture
def backend():
    return seeded_backend()


@pytest.fixture
def theme(tmp_path):
    return ThemeState(tmp_path / "theme.json")


@pytest.fixture
def client(backend, theme):
    app = create_app(api_factory=lambda: make_client(backend), theme_state=theme)
    with TestClient(app, follow_redirects=False) as c:
        backend.calls.clear()
        yield c


def toast_of(response):
    query = parse_qs(urlparse(response.headers["location"]).query)
    return query.get("level", [None])[0], query.get("toast", [None])[0]


class TestNavigation:
    """Tests for the layout and read-only pages."""

    @pytest.mark.parametrize("path,title", [
        ("/", "Dashboard"),
        ("/companies", "Companies"),
        ("/branches", "Branches"),
        ("/employees", "Employees"),
        ("/contacts", "Contacts"),
    ])
    def test_pages_render_with_sidebar(self, client, path, title):
        response = client.get(path)

        assert response.status_code == 200
        assert f"<h1>{title}</h1>" in response.text
        for href in ("/companies", "/branches", "/employees", "/contacts"):
            assert f'href="{href}"' in response.text

    def test_dashboard_shows_counts(self, client):
        response = client.get("/")

        assert "Welcome to BaraaCRM" in response.text
        assert "Total Contacts" in response.text
        assert ">4</h3>" in response.text

    def test_dashboard_partial_failure(self, client, backend):
        backend.fail("GET", "/branch", 500)

        response = client.get("/")

        assert response.status_code == 200
        assert "Failed to load dashboard metrics: Branches" in response.text
        assert ">-</h3>" in response.text
        assert ">1</h3>" in response.text

    def test_branch_card_shows_company(self, client):
        response = client.get("/branches")

        assert "Globex London" in response.text
        assert "Globex" in response.text

    def test_employee_card_shows_branch_and_company(self, client):
        response = client.get("/employees")

        assert "Jane Doe" in response.text
        assert "Globex London · Globex" in response.text

    def test_empty_state(self, theme):
        app = create_app(api_factory=lambda: make_client(FakeCrmBackend()), theme_state=theme)
        with TestClient(app) as c:
            response = c.get("/companies")

        assert "No companies yet" in response.text
        assert "Create Your First Company" in response.text

    def test_failed_load_shows_toast(self, client, backend):
        backend.fail("GET", "/company", None)

        response = client.get("/companies")

        assert response.status_code == 200
        assert "Failed to load companies" in response.text

    def test_unknown_path_is_404_page(self, client):
        response = client.get("/nowhere")

        assert response.status_code == 404
        assert "does not exist" in response.text


class TestCreateFlow:
    """Tests for the create dialog round trip."""

    def test_new_query_opens_dialog(self, client):
        response = client.get("/companies?new=1")

        assert "<dialog open>" in response.text
        assert "Create New Company" in response.text

    def test_dialog_closed_by_default(self, client):
        assert "<dialog" not in client.get("/companies").text

    def test_successful_create_redirects_with_toast(self, client, backend):
        response = client.post("/companies", data={
            "name": "Acme",
            "address": "1 Main St",
            "phone_number": "+1000",
            "email": "a@acme.com",
            "country": "USA",
            "city": "NYC",
        })

        assert response.status_code == 303
        assert response.headers["location"].startswith("/companies?")
        assert toast_of(response) == ("success", "Company created successfully")
        assert backend.records["company"][-1]["name"] == "Acme"

        page = client.get(response.headers["location"])
        assert "Company created successfully" in page.text
        assert "Acme" in page.text

    def test_failed_create_keeps_dialog_and_values(self, client, backend):
        backend.fail("POST", "/branch", 500)

        response = client.post("/branches", data={"company_id": "1", "name": "Paris Office"})

        assert response.status_code == 400
        assert "<dialog open>" in response.text
        assert 'value="Paris Office"' in response.text
        assert "Failed to create branch" in response.text

    def test_missing_parent_is_reported(self, client, backend):
        response = client.post("/employees", data={"first_name": "Max", "last_name": "Mustermann"})

        assert response.status_code == 400
        assert "Please select a branch" in response.text
        assert backend.calls_to("POST") == []

    def test_branch_form_lists_companies(self, client):
        response = client.get("/branches?new=1")

        assert '<option value="1">Globex</option>' in response.text

    def test_branch_form_without_companies(self, theme):
        app = create_app(api_factory=lambda: make_client(FakeCrmBackend()), theme_state=theme)
        with TestClient(app) as c:
            response = c.get("/branches?new=1")

        assert "No companies available" in response.text


class TestDeleteFlow:
    """Tests for the two-step delete."""

    def test_confirmation_page(self, client, backend):
        response = client.get("/companies/1/delete")

        assert response.status_code == 200
        assert "Are you sure you want to delete this company?" in response.text
        assert 'action="/companies/1/delete"' in response.text
        assert backend.calls == []

    def test_post_without_confirm_does_nothing(self, client, backend):
        response = client.post("/companies/1/delete")

        assert response.status_code == 303
        assert response.headers["location"] == "/companies"
        assert backend.calls_to("DELETE") == []

    def test_confirmed_delete(self, client, backend):
        response = client.post("/contacts/1/delete", data={"confirm": "yes"})

        assert response.status_code == 303
        assert toast_of(response) == ("success", "Contact deleted successfully")
        assert backend.calls_to("DELETE") == ["/contact/1"]
        assert "Lena" not in client.get("/contacts").text

    def test_failed_delete(self, client, backend):
        backend.fail("DELETE", "/employee/1", 500)

        response = client.post("/employees/1/delete", data={"confirm": "yes"})

        assert toast_of(response) == ("error", "Failed to delete employee")


class TestContactsPage:
    """Tests for the contacts filter and badges."""

    def test_type_filter(self, client):
        response = client.get("/contacts?type=Lead")

        assert "Lena Smith" in response.text
        assert "Liam Smith" in response.text
        assert "Carl Smith" not in response.text

    def test_unknown_type_shows_all(self, client):
        response = client.get("/contacts?type=Vendor")

        assert "Carl Smith" in response.text
        assert "Pia Smith" in response.text

    def test_badges(self, client):
        response = client.get("/contacts")

        assert "badge-lead" in response.text
        assert "badge-partner" in response.text

    def test_filter_only_fetches_full_listing(self, client, backend):
        client.get("/contacts?type=Partner")

        assert "/contact/type/Partner" not in backend.calls_to("GET")


class TestSystemRoutes:
    """Tests for the theme toggle and the health probe."""

    def test_theme_toggle_redirects_back(self, client, theme):
        response = client.post("/theme", headers={"referer": "http://testserver/contacts?type=Lead"})

        assert response.status_code == 303
        assert response.headers["location"] == "/contacts?type=Lead"
        assert theme.current == "dark"
        assert 'data-theme="dark"' in client.get("/").text

    def test_theme_toggle_ignores_foreign_referer(self, client):
        response = client.post("/theme", headers={"referer": "https://evil.test/phish"})

        assert response.headers["location"] == "/"

    def test_health_probe(self, client):
        response = client.get("/health/api")

        assert response.status_code == 200
        assert response.json()["status"] == "success"

    def test_health_probe_reports_failure(self, client, backend):
        backend.fail("GET", "/company", None)

        body = client.get("/health/api").json()

        assert body["status"] == "error"
        assert body["message"].startswith("Backend connection failed")


class TestStartup:
    """Tests for the application lifespan."""

    def test_dev_health_check_does_not_block_startup(self, monkeypatch, backend, theme):
        """An unanswered startup health check leaves the app serving requests."""
        monkeypatch.setattr(main_module, "get_settings", lambda: Settings(_env_file=None, ENV="dev"))
        probe_started = threading.Event()
        held = []

        async def never_answer_first():
            if not held:
                held.append(True)
                probe_started.set()
                await asyncio.Event().wait()

        backend.before("GET", "/company", never_answer_first)
        app = create_app(api_factory=lambda: make_client(backend), theme_state=theme)

        with TestClient(app) as c:
            assert probe_started.wait(timeout=5)
            response = c.get("/branches")

        assert response.status_code == 200
        assert "Globex London" in response.text


class TestFormFields:
    """Tests for the create dialog inputs."""

    @pytest.mark.parametrize("path,fields", [
        ("/companies", ["name", "email", "phone_number", "address", "city", "country"]),
        ("/branches", ["name", "email", "phone_number", "address", "city", "country"]),
        ("/employees", ["first_name", "last_name", "email", "phone_number", "job_title"]),
        ("/contacts", ["first_name", "last_name", "email", "phone_number", "job_title", "city", "country"]),
    ])
    def test_inputs_are_required(self, client, path, fields):
        html = client.get(f"{path}?new=1").text

        for name in fields:
            kind = "email" if name == "email" else "text"
            assert f'<input id="{name}" name="{name}" type="{kind}" value="" required>' in html

    def test_contact_address_is_optional(self, client):
        html = client.get("/contacts?new=1").text

        assert '<input id="address" name="address" type="text" value="">' in html


class TestContactsFilterRoundTrip:
    """Tests that the active contact filter survives create and delete."""

    def test_create_redirect_keeps_filter(self, client):
        response = client.post("/contacts?type=Lead", data={
            "company_id": "1",
            "first_name": "Nora",
            "last_name": "Lee",
            "contact_type": "Lead",
        })

        assert response.status_code == 303
        assert response.headers["location"].startswith("/contacts?type=Lead&")
        assert toast_of(response) == ("success", "Contact created successfully")

    def test_delete_redirect_keeps_filter(self, client):
        response = client.post("/contacts/1/delete?type=Lead", data={"confirm": "yes"})

        assert response.headers["location"].startswith("/contacts?type=Lead&")
        assert toast_of(response) == ("success", "Contact deleted successfully")

    def test_unconfirmed_delete_keeps_filter(self, client):
        response = client.post("/contacts/1/delete?type=Partner")

        assert response.headers["location"] == "/contacts?type=Partner"

    def test_filtered_page_links_carry_filter(self, client):
        html = client.get("/contacts?type=Lead&new=1").text

        assert 'href="/contacts/1/delete?type=Lead"' in html
        assert 'action="/contacts?type=Lead"' in html

    def test_confirmation_page_carries_filter(self, client):
        html = client.get("/contacts/1/delete?type=Lead").text

        assert 'action="/contacts/1/delete?type=Lead"' in html
        assert 'href="/contacts?type=Lead"' in html

    def test_other_pages_do_not_carry_query(self, client):
        response = client.post("/companies/1/delete?type=Lead", data={"confirm": "yes"})

        assert response.headers["location"].startswith("/companies?toast=")
