from __future__ import annotations

import base64
import io

import pytest

from src.visitor_system.visitor_system.auth.policy import BearerTokenPolicy
from src.visitor_system.visitor_system.core.enums import QRStatus, SignoutPolicy


def test_root_reports_running(make_client):
    resp = make_client().get("/")

    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "VMS API is running"


def test_create_visitor_returns_id_and_qr(make_client, visitors_repo):
    client = make_client(visitors_repo)

    resp = client.post("/api/visitors", data={"first_name": "Minh", "purpose": "Họp"})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["qr"].startswith("data:image/png;base64,")
    created = visitors_repo.get_by_id(body["visitorId"])
    assert created.details.purpose == "Họp"
    assert created.qr_status == QRStatus.UNUSED


def test_create_visitor_with_image_stores_file(make_client, visitors_repo, tmp_path):
    client = make_client(visitors_repo)

    resp = client.post(
        "/api/visitors",
        data={"first_name": "Minh", "image": (io.BytesIO(b"\x89PNG fake"), "face.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    image = visitors_repo.get_by_id(resp.get_json()["visitorId"]).image
    assert image.endswith(".png")
    assert (tmp_path / image).exists()


def test_create_visitor_validation_error_is_400(make_client):
    resp = make_client().post("/api/visitors", data={"first_name": ""})

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "VALIDATION_ERROR"


def test_list_and_get_visitor(make_client, visitors_repo):
    visitors_repo.add(1)
    visitors_repo.add(2)
    client = make_client(visitors_repo)

    listed = client.get("/api/visitors").get_json()
    one = client.get("/api/visitors/2").get_json()

    assert [v["id"] for v in listed] == [2, 1]
    assert one["qr_status"] == "unused"
    assert client.get("/api/visitors/99").status_code == 404


def test_card_returns_qr_for_existing_visitor(make_client, visitors_repo):
    visitors_repo.add(42)
    client = make_client(visitors_repo)

    resp = client.get("/api/visitors/42/card")

    assert resp.status_code == 200
    assert resp.get_json()["qr"].startswith("data:image/png;base64,")
    assert visitors_repo.get_by_id(42).qr_status == QRStatus.UNUSED


def test_card_for_unknown_visitor_is_404(make_client):
    resp = make_client().get("/api/visitors/42/card")

    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "code": "NOT_FOUND", "message": "Không tìm thấy khách #42"}


def test_signout_first_then_replay_strict(make_client, visitors_repo):
    visitors_repo.add(42)
    client = make_client(visitors_repo)

    first = client.get("/api/visitors/signout/42")
    second = client.get("/api/visitors/signout/42")

    assert first.status_code == 200
    assert "đã trả thẻ thành công" in first.get_data(as_text=True)
    assert first.mimetype == "text/html"
    assert second.status_code == 409
    assert "đã được sử dụng" in second.get_data(as_text=True)
    assert visitors_repo.get_by_id(42).qr_status == QRStatus.USED


def test_signout_unknown_visitor_strict_is_404(make_client, visitors_repo):
    resp = make_client(visitors_repo).get("/api/visitors/signout/5")

    assert resp.status_code == 404
    assert visitors_repo.rows == {}


def test_signout_legacy_always_succeeds(make_client, visitors_repo):
    visitors_repo.add(42)
    client = make_client(visitors_repo, signout_policy=SignoutPolicy.LEGACY)

    assert client.get("/api/visitors/signout/42").status_code == 200
    assert client.get("/api/visitors/signout/42").status_code == 200
    assert client.get("/api/visitors/signout/999").status_code == 200
    assert visitors_repo.get_by_id(999) is None
    assert visitors_repo.get_by_id(42).qr_status == QRStatus.USED


def test_signout_storage_failure_is_500(make_client, broken_visitors):
    resp = make_client(broken_visitors).get("/api/visitors/signout/1")

    assert resp.status_code == 500
    assert resp.get_json()["code"] == "STORAGE_ERROR"


def test_toggle_status_route(make_client, visitors_repo):
    visitors_repo.add(3, status=True)
    client = make_client(visitors_repo)

    first = client.put("/api/visitors/3/status").get_json()
    second = client.put("/api/visitors/3/status").get_json()

    assert first == {"message": "Đã đổi trạng thái khách", "status": 0}
    assert second["status"] == 1
    assert client.put("/api/visitors/404/status").status_code == 404


def test_update_visitor_keeps_image_when_none_uploaded(make_client, visitors_repo):
    client = make_client(visitors_repo)
    created = client.post(
        "/api/visitors",
        data={"first_name": "Minh", "image": (io.BytesIO(b"img"), "a.jpg")},
        content_type="multipart/form-data",
    ).get_json()
    image = visitors_repo.get_by_id(created["visitorId"]).image

    resp = client.put(f"/api/visitors/{created['visitorId']}", data={"first_name": "Minh Anh"})

    assert resp.get_json() == {"message": "Cập nhật khách thành công"}
    updated = visitors_repo.get_by_id(created["visitorId"])
    assert updated.details.first_name == "Minh Anh"
    assert updated.image == image


def test_bearer_policy_guards_management_routes_but_not_signout(make_client, visitors_repo):
    visitors_repo.add(42)
    client = make_client(visitors_repo, auth_policy=BearerTokenPolicy(api_token="s3cret"))

    missing = client.get("/api/visitors")
    wrong = client.get("/api/visitors", headers={"Authorization": "Bearer nope"})
    ok = client.get("/api/visitors", headers={"Authorization": "Bearer s3cret"})
    signout = client.get("/api/visitors/signout/42")

    assert missing.status_code == 401
    assert missing.get_json()["code"] == "UNAUTHORIZED"
    assert wrong.status_code == 401
    assert ok.status_code == 200
    assert signout.status_code == 200


def test_scan_route_redeems_decoded_qr(zbar, make_client, visitors_repo, encoder):
    visitors_repo.add(42)
    client = make_client(visitors_repo)
    data_url = encoder.encode(encoder.signout_url(42))
    png = base64.b64decode(data_url.split(",", 1)[1])

    resp = client.post(
        "/api/visitors/signout/scan",
        data={"image": (io.BytesIO(png), "qr.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "visitorId": 42, "outcome": "signed_out"}
    assert visitors_repo.get_by_id(42).qr_status == QRStatus.USED


def test_scan_route_without_image_is_400(make_client):
    resp = make_client().post("/api/visitors/signout/scan", data={})

    assert resp.status_code == 400


def test_unknown_route_is_plain_404(make_client):
    assert make_client().get("/api/nothing-here").status_code == 404


def test_scan_route_without_zbar_is_encoding_error(without_pyzbar, make_client, visitors_repo, encoder):
    visitors_repo.add(42)
    png = base64.b64decode(encoder.encode(encoder.signout_url(42)).split(",", 1)[1])

    resp = make_client(visitors_repo).post(
        "/api/visitors/signout/scan",
        data={"image": (io.BytesIO(png), "qr.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 500
    assert resp.get_json()["code"] == "ENCODING_ERROR"
    assert visitors_repo.get_by_id(42).qr_status == QRStatus.UNUSED


def test_update_unknown_visitor_leaves_no_upload(make_client, visitors_repo, uploaded_files):
    resp = make_client(visitors_repo).put(
        "/api/visitors/999",
        data={"first_name": "Minh", "image": (io.BytesIO(b"img"), "a.png")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 404
    assert uploaded_files() == []


def test_create_visitor_with_unknown_references_is_400(make_client, visitors_repo, uploaded_files):
    client = make_client(visitors_repo)

    for field in ("company_id", "department_id", "designation_id", "whom_to_meet"):
        resp = client.post(
            "/api/visitors",
            data={"first_name": "Minh", field: "9", "image": (io.BytesIO(b"img"), "a.png")},
            content_type="multipart/form-data",
        )

        assert resp.status_code == 400, field
        assert resp.get_json()["code"] == "VALIDATION_ERROR"

    assert visitors_repo.rows == {}
    assert uploaded_files() == []


def test_create_visitor_with_known_references(make_client, visitors_repo, org_service, employee_service):
    company_id = org_service.create_company({"name": "Acme"})
    department_id = org_service.create_department({"company_id": company_id, "name": "IT"})
    host_id = employee_service.create_employee(
        {"first_name": "Hoa", "password": "secret1", "confirm_password": "secret1"}
    )

    resp = make_client(visitors_repo).post(
        "/api/visitors",
        data={
            "first_name": "Minh",
            "company_id": str(company_id),
            "department_id": str(department_id),
            "whom_to_meet": str(host_id),
        },
    )

    assert resp.status_code == 200
    visitor = visitors_repo.get_by_id(resp.get_json()["visitorId"])
    assert visitor.details.whom_to_meet == host_id
