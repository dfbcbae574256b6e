import logging
from datetime import datetime, timezone
from typing import Dict, Optional, Any
from google.cloud import logging as cloud_logging


logger = logging.getLogger(__name__)


class AuditLoggingService:
    def __init__(self, project_id: Optional[str], log_name: str = "tax-estimator-audit", client=None):
        """
        Initialize audit logging service.

        Args:
            project_id: GCP project ID
            log_name: Cloud Logging log name
            client: Pre-built Cloud Logging client (created when omitted)
        """
        self.project_id = project_id

        # Initialize Cloud Logging client
        self.client = client or cloud_logging.Client(project=project_id)
        self.logger = self.client.logger(log_name)

    def log_event(
        self,
        event_type: str,
        severity: str = "INFO",
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Log an audit event to Cloud Logging.

        Args:
            event_type: Type of event (e.g., "tax_calculated", "documents_uploaded")
            severity: Log severity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            ip_address: Client IP address
            details: Additional event details
        """
        try:
            log_entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "event_type": event_type,
                "severity": severity
            }

            if ip_address:
                log_entry["ip_address"] = ip_address

            if details:
                log_entry["details"] = details

            self.logger.log_struct(log_entry, severity=severity)

        except Exception as e:
            # Never fail the request due to an audit logging error
            logger.warning(f"Audit log write failed for {event_type}: {str(e)}")

    # Convenience methods for common events

    def log_tax_calculated(self, filing_status: str, total_gross_income: float,
                           refund_type: str, amount: float, document_count: int = 0,
                           ip_address: Optional[str] = None):
        """Log a completed tax estimate"""
        self.log_event(
            event_type="tax_calculated",
            ip_address=ip_address,
            details={
                "filing_status": filing_status,
                "total_gross_income": total_gross_income,
                "refund_type": refund_type,
                "amount": amount,
                "document_count": document_count,
                "action": "Tax estimate computed"
            }
        )

    def log_validation_failed(self, missing_fields, ip_address: Optional[str] = None):
        """Log a request rejected for missing fields"""
        self.log_event(
            event_type="validation_failed",
            severity="WARNING",
            ip_address=ip_address,
            details={
                "missing_fields": list(missing_fields),
                "action": "Tax calculation rejected"
            }
        )

    def log_calculation_failed(self, error: str, ip_address: Optional[str] = None):
        """Log an unexpected calculation failure"""
        self.log_event(
            event_type="calculation_failed",
            severity="ERROR",
            ip_address=ip_address,
            details={
                "error": error,
                "action": "Tax calculation failed"
            }
        )

    def log_documents_uploaded(self, filenames, total_size: int,
                               ip_address: Optional[str] = None):
        """Log a document upload"""
        self.log_event(
            event_type="documents_uploaded",
            ip_address=ip_address,
            details={
                "filenames": list(filenames),
                "file_count": len(filenames),
                "total_size_bytes": total_size,
                "action": "Documents received"
            }
        )

    def log_upload_rejected(self, reason: str, filename: Optional[str] = None,
                            ip_address: Optional[str] = None):
        """Log a rejected upload"""
        details = {
            "reason": reason,
            "action": "Upload rejected"
        }
        if filename:
            details["filename"] = filename

        self.log_event(
            event_type="upload_rejected",
            severity="WARNING",
            ip_address=ip_address,
            details=details
        )
