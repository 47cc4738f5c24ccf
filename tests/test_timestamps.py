"""Tests for status date stamping."""

from datetime import datetime

from spac_os.models import ComplianceStatus, FilingStatus, SpacStatus, TargetStatus
from spac_os.rules.timestamps import status_date_fields


NOW = datetime(2024, 3, 1, 12, 0, 0)


class TestStatusDateFields:
    """Tests for which dates are stamped on entry to a status."""

    def test_filed_stamps_filed_date(self):
        assert status_date_fields(FilingStatus.FILED, now=NOW) == {"filed_date": NOW}

    def test_effective_stamps_effective_date(self):
        assert status_date_fields(FilingStatus.EFFECTIVE, now=NOW) == {"effective_date": NOW}

    def test_provided_date_wins(self):
        filed = datetime(2024, 2, 15)
        fields = status_date_fields(
            FilingStatus.FILED,
            now=NOW,
            provided={"filed_date": filed, "effective_date": None},
        )
        assert fields == {"filed_date": filed}

    def test_compliant_stamps_completed_date(self):
        assert status_date_fields(ComplianceStatus.COMPLIANT, now=NOW) == {"completed_date": NOW}

    def test_target_milestones(self):
        assert status_date_fields(TargetStatus.NDA_SIGNED, now=NOW) == {"nda_signed_date": NOW}
        assert status_date_fields(TargetStatus.LOI, now=NOW) == {"loi_signed_date": NOW}
        assert status_date_fields(TargetStatus.DEFINITIVE, now=NOW) == {"da_signed_date": NOW}
        assert status_date_fields(TargetStatus.CLOSED, now=NOW) == {"actual_close_date": NOW}

    def test_other_statuses_stamp_nothing(self):
        assert status_date_fields(FilingStatus.SEC_COMMENT, now=NOW) == {}
        assert status_date_fields(ComplianceStatus.IN_PROGRESS, now=NOW) == {}
        assert status_date_fields(SpacStatus.COMPLETED, now=NOW) == {}
        assert status_date_fields(TargetStatus.TERMINATED, now=NOW) == {}

    def test_plain_string_stamps_nothing(self):
        assert status_date_fields("FILED", now=NOW) == {}

    def test_defaults_to_current_time(self):
        before = datetime.utcnow()
        fields = status_date_fields(FilingStatus.FILED)
        assert fields["filed_date"] >= before
