"""Tests for diagnostics, defaults and logging helpers."""

import logging

import pytest

from wrangle_tlbx.utils import (
    DEFAULT_CFG,
    Diagnostic,
    Diagnostics,
    TransformConfig,
    configure_logging,
    get_logger,
    resolve_diagnostics,
)


class TestDiagnostics:
    """The diagnostics collector."""

    def test_records_and_filters(self) -> None:
        """Messages are recorded in order and can be filtered by level."""
        diag = Diagnostics()
        diag.info("first")
        diag.warning("second", "col")
        assert diag.messages() == ["first", "second"]
        assert diag.messages("warning") == ["second"]
        assert list(diag)[1] == Diagnostic(level="warning", message="second", context="col")
        diag.clear()
        assert len(diag) == 0

    def test_muted(self) -> None:
        """A muted collector records nothing."""
        diag = Diagnostics(verbose=False)
        diag.warning("ignored")
        assert len(diag) == 0

    def test_forwarded_to_logger(self, caplog: pytest.LogCaptureFixture) -> None:
        """Records are also logged, with their context."""
        with caplog.at_level(logging.INFO, logger="wrangle_tlbx"):
            Diagnostics().warning("SD is 0", "x")
        assert "[x] SD is 0" in caplog.text

    def test_resolve(self) -> None:
        """verbose=False never writes into the caller's collector."""
        diag = Diagnostics()
        assert resolve_diagnostics(diag) is diag
        muted = resolve_diagnostics(diag, verbose=False)
        assert muted is not diag
        assert not muted.verbose
        assert isinstance(resolve_diagnostics(None), Diagnostics)


class TestConfig:
    """Transformation defaults."""

    def test_defaults(self) -> None:
        """Suffixes and the MAD constant."""
        assert DEFAULT_CFG.standardize_suffix == "_z"
        assert DEFAULT_CFG.within_suffix == "_within"
        assert DEFAULT_CFG.mad_constant == pytest.approx(1.4826)

    def test_overrides_return_copy(self) -> None:
        """Configs are immutable; overrides create a new instance."""
        cfg = DEFAULT_CFG.with_overrides(center_suffix="_ctr")
        assert isinstance(cfg, TransformConfig)
        assert cfg.center_suffix == "_ctr"
        assert DEFAULT_CFG.center_suffix == "_c"


class TestLogging:
    """Logger configuration."""

    def test_configure_replaces_handlers(self, tmp_path) -> None:
        """Repeated configuration does not stack handlers."""
        name = "wrangle_tlbx.test_logging"
        configure_logging(log_file=tmp_path / "out.log", name=name)
        logger = configure_logging(log_file=tmp_path / "out.log", name=name)
        assert len(logger.handlers) == 2
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "out.log").read_text(encoding="utf-8")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_get_logger(self) -> None:
        """The default logger is the package logger."""
        assert get_logger().name == "wrangle_tlbx"
