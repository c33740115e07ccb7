from __future__ import annotations

import logging
import signal
import threading
from unittest.mock import MagicMock, patch

import pytest
from pydantic import ValidationError

from integration_fimbul import main as cli
from integration_fimbul.config import Settings
from integration_fimbul.errors import HTTPStatusError, RunCancelledError


def _service_mock(side_effect=None):  # noqa: ANN001
    service = MagicMock()
    service.create_weather_observed.side_effect = side_effect
    return service


@patch("integration_fimbul.main.WeatherObservedService")
def test_run_returns_zero_on_success(mock_service_cls, test_settings):
    service = _service_mock()
    mock_service_cls.return_value = service
    settings = test_settings.model_copy(update={"station_ids": "A-01,B-02"})

    assert cli.run(settings) == cli.EXIT_OK
    service.create_weather_observed.assert_called_once_with(
        ["A-01", "B-02"], settings.entity_prefix_ending
    )


@patch("integration_fimbul.main.WeatherObservedService")
def test_run_maps_failures_to_exit_codes(mock_service_cls, test_settings, caplog):
    mock_service_cls.return_value = _service_mock(HTTPStatusError(500, "http://fimbul.test"))
    caplog.set_level(logging.ERROR, logger="integration_fimbul.main")

    assert cli.run(test_settings) == cli.EXIT_FAILURE
    assert any("HTTPStatusError" in record.getMessage() for record in caplog.records)

    mock_service_cls.return_value = _service_mock(RunCancelledError("stop"))
    assert cli.run(test_settings) == cli.EXIT_CANCELLED


def test_arguments_override_settings(test_settings):
    args = cli.parse_args(
        ["--stations", "X-01,Y-02", "--prefix", "custom", "--no-clock-skew-correction"]
    )

    settings = cli._apply_overrides(test_settings, args)

    assert settings.station_id_list == ["X-01", "Y-02"]
    assert settings.entity_prefix_ending == "custom"
    assert settings.apply_clock_skew_correction is False
    assert test_settings.apply_clock_skew_correction is True


def test_legacy_station_flag_is_accepted():
    args = cli.parse_args(["--stationId", "S-vall-01-02"])
    assert args.stations == "S-vall-01-02"


@patch("integration_fimbul.main.run")
@patch("integration_fimbul.main.get_settings")
def test_main_reports_invalid_configuration(mock_get_settings, mock_run):
    with pytest.raises(ValidationError) as excinfo:
        Settings(fimbul_url="")
    mock_get_settings.side_effect = excinfo.value

    assert cli.main([]) == cli.EXIT_CONFIG
    mock_run.assert_not_called()


def test_signal_handler_sets_event_and_interrupts():
    stop_event = threading.Event()
    handler = cli.make_signal_handler(stop_event)

    with pytest.raises(KeyboardInterrupt):
        handler(signal.SIGTERM, None)

    assert stop_event.is_set()


@patch("integration_fimbul.main.WeatherObservedService")
def test_run_maps_interrupt_to_cancelled(mock_service_cls, test_settings):
    mock_service_cls.return_value = _service_mock(KeyboardInterrupt())
    stop_event = threading.Event()

    assert cli.run(test_settings, stop_event=stop_event) == cli.EXIT_CANCELLED
    assert stop_event.is_set()
