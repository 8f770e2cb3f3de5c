# tests/test_logger.py
"""Tests for actor-tagged logging and the security audit logger."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging
from fleet_portal.services.security_log_service import SecurityLogService
from fleet_portal.utils.logger import AUDIT_LOGGER, ActorFilter, bind_actor, clear_actor
from conftest import NOW, add_booking, add_vehicle


def tagged(message="hello"):
    record = logging.LogRecord("fleet_portal.test", logging.INFO, __file__, 1, message, None, None)
    ActorFilter().filter(record)
    return record.actor


class TestActorFilter:
    def test_outside_a_request(self):
        assert tagged() == "-"

    def test_bound_actor(self):
        bind_actor("security", "PTC")
        try:
            assert tagged() == "security@PTC"
        finally:
            clear_actor()
        assert tagged() == "-"

    def test_missing_role_is_anonymous(self):
        bind_actor(None, "PTC")
        try:
            assert tagged() == "anonymous"
        finally:
            clear_actor()


class TestAuditLogger:
    def test_key_issue_written_to_audit_logger(self, db, pune_security, caplog):
        vehicle = add_vehicle(db)
        booking = add_booking(db, vehicle, status="approved")
        with caplog.at_level(logging.INFO, logger=AUDIT_LOGGER):
            SecurityLogService.for_session(db).log_key_issued(pune_security, booking, vehicle, now=NOW)
        audit = [r for r in caplog.records if r.name == AUDIT_LOGGER]
        assert len(audit) == 1
        assert "Key Issued" in audit[0].getMessage()
