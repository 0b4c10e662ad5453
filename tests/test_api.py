import pytest

from compliance_hub.services.rule_import import SAMPLE_FILENAME

RULES = "/api/compliance-rules"
SUBMISSIONS = "/api/compliance-submissions"

PROPOSAL = {
    "company_name": "Acme Technologies",
    "company_type": "Private Limited",
    "country_code": "IN",
    "country_name": "India",
    "compliance_name": "Board Meeting Minutes",
    "frequency": "monthly",
    "verification_required": "CS",
}


class TestApp:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_routes_listing(self, client):
        routes = client.get("/routes-simple").text
        assert "POST: /api/compliance-rules/bulk-upload" in routes


class TestAuth:
    def test_signup_login_and_me(self, client):
        response = client.post(
            "/api/auth/signup",
            json={
                "email": "new@example.com",
                "password": "correct-horse",
                "full_name": "New Founder",
                "role": "Investor",
            },
        )
        assert response.status_code == 201
        assert response.json()["user"]["role"] == "Investor"

        response = client.post(
            "/api/auth/login",
            json={"email": "new@example.com", "password": "correct-horse"},
        )
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "new@example.com"
        assert me.json()["is_admin"] is False

    def test_duplicate_signup(self, client, startup_user):
        response = client.post(
            "/api/auth/signup",
            json={
                "email": startup_user.email,
                "password": "another-pass",
                "full_name": "Someone Else",
            },
        )
        assert response.status_code == 409

    def test_bad_login(self, client):
        response = client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "whatever1"},
        )
        assert response.status_code == 401

    def test_refresh(self, client):
        client.post(
            "/api/auth/signup",
            json={
                "email": "refresh@example.com",
                "password": "correct-horse",
                "full_name": "Refresh User",
            },
        )
        tokens = client.post(
            "/api/auth/login",
            json={"email": "refresh@example.com", "password": "correct-horse"},
        ).json()

        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"

        response = client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["access_token"]}
        )
        assert response.status_code == 401


class TestComplianceRules:
    def test_public_reads(self, client, seeded_rules):
        response = client.get(f"{RULES}/by-country/IN/company-type/Private%20Limited")
        assert response.status_code == 200
        assert {r["compliance_name"] for r in response.json()} == {
            "Tax Audit",
            "Annual Return",
        }

        countries = client.get(f"{RULES}/countries").json()
        assert [c["country_code"] for c in countries] == ["IN", "GB", "US"]

        assert client.get(f"{RULES}/company-types", params={"country_code": "US"}).json() == [
            "LLC"
        ]
        assert client.get(f"{RULES}/countries/IN/ca-type").json()["ca_type"] == "CA"

    def test_filtered_listing(self, client, seeded_rules):
        response = client.get(f"{RULES}/", params={"verification": "CA"})
        assert {r["compliance_name"] for r in response.json()} == {
            "Tax Audit",
            "Quarterly Tax Filing",
        }

    def test_missing_rule(self, client):
        response = client.get(f"{RULES}/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Compliance rule 999 not found"

    @pytest.mark.parametrize("headers_fixture, expected", [(None, 401), ("user_headers", 403)])
    def test_writes_require_admin(self, client, request, headers_fixture, expected):
        headers = request.getfixturevalue(headers_fixture) if headers_fixture else {}
        response = client.post(
            f"{RULES}/",
            json={
                "country_code": "IN",
                "country_name": "India",
                "company_type": "Private Limited",
                "compliance_name": "GST Return",
            },
            headers=headers,
        )
        assert response.status_code == expected

    def test_admin_crud(self, client, admin_headers):
        response = client.post(
            f"{RULES}/",
            json={
                "country_code": "IN",
                "country_name": "India",
                "company_type": "Private Limited",
                "compliance_name": "GST Return",
                "frequency": "sometimes",
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        rule = response.json()
        assert rule["frequency"] == "annual"
        assert rule["verification_required"] == "both"

        response = client.put(
            f"{RULES}/{rule['id']}",
            json={"frequency": "monthly"},
            headers=admin_headers,
        )
        assert response.json()["frequency"] == "monthly"

        response = client.delete(f"{RULES}/{rule['id']}", headers=admin_headers)
        assert response.json()["success"] is True
        assert client.get(f"{RULES}/{rule['id']}").status_code == 404

    def test_add_country(self, client, admin_headers):
        response = client.post(
            f"{RULES}/countries",
            json={
                "country_code": "US",
                "country_name": "United States",
                "ca_types": ["CPA", "EA"],
                "cs_types": ["CS"],
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert len(response.json()) == 3
        assert client.get(f"{RULES}/company-types").json() == []
        assert client.get(f"{RULES}/countries/US/cs-type").json()["cs_type"] == "CS"

    def test_add_country_rejects_blank_designations(self, client, admin_headers):
        response = client.post(
            f"{RULES}/countries",
            json={
                "country_code": "US",
                "country_name": "United States",
                "ca_types": [" "],
                "cs_types": ["CS"],
            },
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_bulk_upload(self, client, admin_headers):
        content = (
            "Country Co,Country Name,Company,Complianc,Verificatio\n"
            "IN,India,Private Limited,Tax Audit,Chartered Accountant\n"
            "IN,India,,Annual Return,CS\n"
        ).encode()

        response = client.post(
            f"{RULES}/bulk-upload",
            files={"file": ("rules.csv", content, "text/csv")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] == 1
        assert body["skipped"] == 0
        assert body["errors"][0]["row"] == 2

        rules = client.get(f"{RULES}/by-country/IN").json()
        assert rules[0]["verification_required"] == "CA"

    def test_bulk_upload_unsupported_file(self, client, admin_headers):
        response = client.post(
            f"{RULES}/bulk-upload",
            files={"file": ("rules.txt", b"hello", "text/plain")},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_sample_file(self, client):
        response = client.get(f"{RULES}/sample-file")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert SAMPLE_FILENAME in response.headers["content-disposition"]
        assert response.text.startswith("Country Code,Country Name")


class TestCountries:
    def test_list_and_detail(self, client, seeded_rules):
        countries = client.get("/api/countries/").json()
        assert {c["country_code"] for c in countries} == {"IN", "GB", "US"}

        india = client.get("/api/countries/IN").json()
        assert india["ca_type"] == "CA"
        assert client.get("/api/countries/FR").status_code == 404

    def test_resolve(self, client):
        response = client.get("/api/countries/resolve", params={"country": "Singapore"})
        assert response.json()["ca_type"] == "Chartered Accountant"
        assert (
            client.get("/api/countries/resolve", params={"country": "Atlantis"}).status_code
            == 404
        )

    def test_validate_profile(self, client, seeded_rules):
        response = client.post(
            "/api/countries/validate-profile",
            json={"country": "US", "company_type": "LLC", "cs_type": "Secretary"},
        )
        assert response.json() == {
            "valid": False,
            "errors": ['CS type must be "Corporate Secretary" for United States'],
        }

    def test_dashboard(self, client, seeded_rules):
        response = client.get(
            "/api/countries/US/dashboard", params={"company_type": "LLC"}
        )
        body = response.json()
        assert body["ca_type"] == "CPA"
        assert [r["compliance_name"] for r in body["compliance_rules"]] == [
            "Quarterly Tax Filing"
        ]


class TestSubmissions:
    def test_submit_requires_login(self, client):
        assert client.post(f"{SUBMISSIONS}/", json=PROPOSAL).status_code == 401

    def test_review_requires_admin(self, client, user_headers):
        assert client.get(f"{SUBMISSIONS}/", headers=user_headers).status_code == 403

    def test_blank_country_rejected(self, client, user_headers):
        response = client.post(
            f"{SUBMISSIONS}/",
            json={**PROPOSAL, "country_code": " ", "country_name": " "},
            headers=user_headers,
        )
        assert response.status_code == 422

    def test_submit_approve_and_query(self, client, user_headers, admin_headers):
        response = client.post(f"{SUBMISSIONS}/", json=PROPOSAL, headers=user_headers)
        assert response.status_code == 201
        submission = response.json()
        assert submission["status"] == "pending"

        mine = client.get(f"{SUBMISSIONS}/mine", headers=user_headers).json()
        assert [s["id"] for s in mine] == [submission["id"]]

        response = client.post(
            f"{SUBMISSIONS}/{submission['id']}/approve", headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "approved"
        assert response.json()["promoted_rule_id"] is not None

        rules = client.get(f"{RULES}/by-country/IN/company-type/Private%20Limited").json()
        assert [(r["compliance_name"], r["frequency"]) for r in rules] == [
            ("Board Meeting Minutes", "monthly")
        ]

        response = client.post(
            f"{SUBMISSIONS}/{submission['id']}/reject", headers=admin_headers
        )
        assert response.status_code == 409

    def test_status_update_and_stats(self, client, user_headers, admin_headers):
        submission = client.post(
            f"{SUBMISSIONS}/", json=PROPOSAL, headers=user_headers
        ).json()

        response = client.patch(
            f"{SUBMISSIONS}/{submission['id']}/status",
            json={"status": "under_review", "review_notes": "Checking the Act"},
            headers=admin_headers,
        )
        assert response.json()["status"] == "under_review"

        response = client.post(
            f"{SUBMISSIONS}/{submission['id']}/reject",
            json={"review_notes": "Not applicable"},
            headers=admin_headers,
        )
        assert response.json()["review_notes"] == "Not applicable"

        stats = client.get(f"{SUBMISSIONS}/stats", headers=admin_headers).json()
        assert stats["rejected"] == 1
        assert stats["total"] == 1

        listed = client.get(
            f"{SUBMISSIONS}/", params={"status": "rejected"}, headers=admin_headers
        ).json()
        assert len(listed) == 1

    def test_delete_and_missing(self, client, user_headers, admin_headers):
        submission = client.post(
            f"{SUBMISSIONS}/", json=PROPOSAL, headers=user_headers
        ).json()

        response = client.delete(f"{SUBMISSIONS}/{submission['id']}", headers=admin_headers)
        assert response.json()["success"] is True
        assert (
            client.get(f"{SUBMISSIONS}/{submission['id']}", headers=admin_headers).status_code
            == 404
        )
