import logging

from sfclient.logging_config import RedactBearerFilter, configure_logging


def test_configure_logging_levels(caplog):
    configure_logging(None)
    logger = logging.getLogger("sfclient.test")
    logger.warning("warn")
    assert any("warn" in rec.message for rec in caplog.records)

    caplog.clear()
    configure_logging(logging.INFO)
    logger.info("info-ok")
    assert any("info-ok" in rec.message for rec in caplog.records)

    caplog.clear()
    configure_logging(logging.DEBUG)
    logger.debug("dbg")
    assert any("dbg" in rec.message for rec in caplog.records)


def test_configure_logging_quiets_urllib3():
    configure_logging(logging.DEBUG)

    assert logging.getLogger("urllib3.connection").level == logging.ERROR
    assert logging.getLogger("urllib3.connectionpool").level == logging.WARNING


def test_redact_bearer_filter_masks_token():
    record = logging.LogRecord(
        "sfclient.client", logging.DEBUG, __file__, 1, "headers: %s", ({"Authorization": "Bearer 00DFAKE!tok"},), None
    )

    assert RedactBearerFilter().filter(record) is True
    assert record.getMessage() == "headers: {'Authorization': 'Bearer ***'}"


def test_redact_bearer_filter_leaves_other_messages():
    record = logging.LogRecord("sfclient", logging.INFO, __file__, 1, "GET %s", ("https://x/limits",), None)

    RedactBearerFilter().filter(record)

    assert record.args == ("https://x/limits",)
    assert record.getMessage() == "GET https://x/limits"


def test_configure_logging_installs_filter_once():
    configure_logging(logging.INFO)
    configure_logging(logging.INFO)

    for handler in logging.getLogger().handlers:
        assert sum(isinstance(f, RedactBearerFilter) for f in handler.filters) == 1
