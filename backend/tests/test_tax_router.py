"""Tests for the /calculate-tax endpoint."""

from tax_estimator.main import app
from tax_estimator.services.tax_tables import DISCLAIMER


SINGLE_FILER = {
    "filingStatus": "single",
    "income": "50000",
    "age": "30",
    "dependents": "0",
    "useStandardDeduction": "true"
}

MARRIED_FILER = {
    "filingStatus": "married",
    "income": "0",
    "w2Income": "30000",
    "selfEmploymentIncome": "0",
    "dependents": "2"
}


class TestCalculateTaxJson:

    def test_single_filer_owes(self, client):
        response = client.post("/calculate-tax", json=SINGLE_FILER)

        assert response.status_code == 200
        body = response.json()
        assert body["taxYear"] == 2024
        assert body["filingStatus"] == "single"
        assert body["taxpayerInfo"] == {"age": 30, "dependents": 0}
        assert body["deductions"] == {
            "standardDeduction": 13850,
            "itemizedDeductions": 0,
            "deductionUsed": 13850,
            "deductionType": "standard"
        }
        assert body["taxCalculation"]["taxableIncome"] == 36150
        assert body["taxCalculation"]["federalIncomeTax"] == 4118.00
        assert body["taxCalculation"]["totalTaxLiability"] == 4118.00
        assert body["refundOrOwed"]["amount"] == -4118.00
        assert body["refundOrOwed"]["type"] == "owed"
        assert body["uploadedDocuments"] == []
        assert body["disclaimer"] == DISCLAIMER
        assert body["calculationDate"].endswith("Z")

    def test_income_breakdown_keys(self, client):
        response = client.post("/calculate-tax", json=MARRIED_FILER)

        breakdown = response.json()["income"]["breakdown"]
        assert set(breakdown) == {
            "primary", "w2", "selfEmployment", "interest",
            "dividends", "capitalGains", "other"
        }
        assert breakdown["w2"] == 30000

    def test_numeric_json_values(self, client):
        response = client.post("/calculate-tax", json={
            "filingStatus": "married",
            "income": 0,
            "w2Income": 30000,
            "dependents": 2
        })

        assert response.status_code == 200
        assert response.json()["refundOrOwed"]["amount"] == 6000.00

    def test_json_false_flag_itemizes(self, client):
        response = client.post("/calculate-tax", json={
            "filingStatus": "single",
            "income": "90000",
            "itemizedDeductions": "25000",
            "useStandardDeduction": False
        })

        deductions = response.json()["deductions"]
        assert deductions["deductionType"] == "itemized"
        assert deductions["deductionUsed"] == 25000

    def test_non_object_body_rejected(self, client):
        response = client.post("/calculate-tax", json=["single", "50000"])

        assert response.status_code == 400

    def test_malformed_json_rejected(self, client):
        response = client.post(
            "/calculate-tax",
            content=b'{"filingStatus": "single", "income": ',
            headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Request body is not valid JSON"

    def test_invalid_utf8_json_rejected(self, client, audit_logger):
        response = client.post(
            "/calculate-tax",
            content=b'{"filingStatus": "\xff"}',
            headers={"content-type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Request body is not valid JSON"
        audit_logger.log_calculation_failed.assert_not_called()

    def test_huge_income_succeeds(self, client):
        response = client.post("/calculate-tax", json={"filingStatus": "single", "income": "1e27"})

        assert response.status_code == 200
        assert response.json()["taxCalculation"]["federalIncomeTax"] > 0


class TestCalculateTaxForm:

    def test_married_filer_refund(self, client):
        response = client.post("/calculate-tax", data=MARRIED_FILER)

        assert response.status_code == 200
        body = response.json()
        assert body["taxCalculation"]["earnedIncomeCredit"] == 6604
        assert body["taxCalculation"]["federalIncomeTax"] == 230.00
        assert body["taxCalculation"]["totalTaxLiability"] == 0
        assert body["refundOrOwed"]["estimatedWithholding"] == 6000
        assert body["refundOrOwed"]["amount"] == 6000.00
        assert body["refundOrOwed"]["type"] == "refund"

    def test_documents_are_described(self, client):
        response = client.post(
            "/calculate-tax",
            data=SINGLE_FILER,
            files=[
                ("documents", ("w2.pdf", b"%PDF-1.4 test", "application/pdf")),
                ("documents", ("receipt.png", b"\x89PNG\r\n", "image/png")),
            ]
        )

        assert response.status_code == 200
        assert response.json()["uploadedDocuments"] == [
            {"filename": "w2.pdf", "mimetype": "application/pdf", "size": 13},
            {"filename": "receipt.png", "mimetype": "image/png", "size": 6},
        ]

    def test_invalid_document_rejected(self, client):
        response = client.post(
            "/calculate-tax",
            data=SINGLE_FILER,
            files=[("documents", ("setup.exe", b"MZ", "application/octet-stream"))]
        )

        assert response.status_code == 400
        assert "Invalid file type" in response.json()["detail"]


class TestCalculateTaxErrors:

    def test_missing_income(self, client):
        response = client.post("/calculate-tax", json={"filingStatus": "single"})

        assert response.status_code == 400
        assert response.json()["detail"] == {
            "error": "Missing required fields: filingStatus and income"
        }

    def test_missing_filing_status(self, client):
        response = client.post("/calculate-tax", data={"income": "50000"})

        assert response.status_code == 400

    def test_empty_body(self, client):
        response = client.post("/calculate-tax")

        assert response.status_code == 400

    def test_unexpected_failure(self, client, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("bracket table unavailable")

        monkeypatch.setattr(app.state.tax_engine, "calculate_eitc", boom)

        response = client.post("/calculate-tax", json=SINGLE_FILER)

        assert response.status_code == 500
        assert response.json()["detail"] == {
            "error": "Internal server error during tax calculation",
            "message": "bracket table unavailable"
        }


class TestAuditEvents:

    def test_calculation_logged(self, client, audit_logger):
        client.post("/calculate-tax", json=SINGLE_FILER)

        audit_logger.log_tax_calculated.assert_called_once()
        kwargs = audit_logger.log_tax_calculated.call_args.kwargs
        assert kwargs["filing_status"] == "single"
        assert kwargs["refund_type"] == "owed"
        assert kwargs["document_count"] == 0

    def test_validation_failure_logged(self, client, audit_logger):
        client.post("/calculate-tax", json={"income": "1"})

        audit_logger.log_validation_failed.assert_called_once()
        assert audit_logger.log_validation_failed.call_args.args[0] == ["filingStatus"]

    def test_computation_failure_logged(self, client, audit_logger, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(app.state.tax_engine, "calculate_tax", boom)
        client.post("/calculate-tax", json=SINGLE_FILER)

        audit_logger.log_calculation_failed.assert_called_once()


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "OK"
        assert "timestamp" in response.json()

    def test_config(self, client):
        response = client.get("/config")

        assert response.status_code == 200
        assert response.json()["tax_year"] == 2024
