"""
Tests for the post-deployment health check script.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from scripts import health_check


def fake_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    if payload is None:
        response.json.side_effect = ValueError('no json')
    else:
        response.json.return_value = payload
    return response


class TestStatusCheck:

    def test_connected_status_passes(self):
        payload = {'status': 'ok', 'mongoConnection': 'connected', 'timestamp': '2026-01-01T00:00:00.000Z'}
        with patch.object(health_check.requests, 'get', return_value=fake_response(200, payload)) as get:
            success, message = health_check.check_status_endpoint('https://app.example.org/')
        assert success
        get.assert_called_once_with('https://app.example.org/api/status', timeout=10)

    def test_disconnected_status_fails(self):
        payload = {'status': 'ok', 'mongoConnection': 'disconnected'}
        with patch.object(health_check.requests, 'get', return_value=fake_response(200, payload)):
            success, message = health_check.check_status_endpoint('https://app.example.org')
        assert not success
        assert 'disconnected' in message

    def test_server_error_fails(self):
        with patch.object(health_check.requests, 'get', return_value=fake_response(500)):
            success, _ = health_check.check_status_endpoint('https://app.example.org')
        assert not success

    def test_invalid_json_fails(self):
        with patch.object(health_check.requests, 'get', return_value=fake_response(200)):
            success, message = health_check.check_status_endpoint('https://app.example.org')
        assert not success
        assert 'invalid JSON' in message

    def test_timeout_fails(self):
        with patch.object(health_check.requests, 'get', side_effect=requests.exceptions.Timeout()):
            success, message = health_check.check_status_endpoint('https://app.example.org', timeout=3)
        assert not success
        assert 'timed out after 3 seconds' in message


class TestPreflightCheck:

    def test_preflight_200_passes(self):
        with patch.object(health_check.requests, 'options', return_value=fake_response(200)):
            success, _ = health_check.check_preflight('https://app.example.org')
        assert success

    def test_connection_error_fails(self):
        with patch.object(health_check.requests, 'options', side_effect=requests.exceptions.ConnectionError()):
            success, message = health_check.check_preflight('https://app.example.org')
        assert not success
        assert 'connection failed' in message


class TestReport:

    def test_failed_checks_keep_run_order(self):
        results = {'preflight': (False, 'x'), 'api_status': (False, 'y')}
        assert health_check.failed_checks(results) == ['preflight', 'api_status']

    def test_report_names_failures(self, capsys):
        results = {'preflight': (True, 'ok'), 'api_status': (False, 'down')}
        assert health_check.report(results, 1, 3) is False
        out = capsys.readouterr().out
        assert 'FAIL  api_status' in out
        assert 'Attempt 1/3: api_status failed' in out

    def test_report_healthy(self, capsys):
        results = {'preflight': (True, 'ok'), 'api_status': (True, 'ok')}
        assert health_check.report(results, 2, 3) is True
        assert 'Healthy on attempt 2/3' in capsys.readouterr().out


class TestMain:

    ARGS = ['--url', 'https://app.example.org', '--environment', 'preview']

    def test_returns_zero_when_healthy(self):
        results = {'preflight': (True, 'ok'), 'api_status': (True, 'ok')}
        with patch.object(health_check, 'run_health_checks', return_value=results) as run, \
                patch.object(health_check.time, 'sleep') as sleep:
            assert health_check.main(self.ARGS) == 0
        assert run.call_count == 1
        sleep.assert_not_called()

    def test_returns_one_after_retries(self):
        results = {'preflight': (True, 'ok'), 'api_status': (False, 'down')}
        with patch.object(health_check, 'run_health_checks', return_value=results) as run, \
                patch.object(health_check.time, 'sleep') as sleep:
            assert health_check.main(self.ARGS + ['--retry', '2', '--retry-delay', '4']) == 1
        assert run.call_count == 2
        sleep.assert_called_once_with(4)

    def test_recovers_on_later_attempt(self):
        down = {'preflight': (True, 'ok'), 'api_status': (False, 'down')}
        up = {'preflight': (True, 'ok'), 'api_status': (True, 'ok')}
        with patch.object(health_check, 'run_health_checks', side_effect=[down, up]), \
                patch.object(health_check.time, 'sleep'):
            assert health_check.main(self.ARGS) == 0

    def test_environment_must_be_known(self):
        with pytest.raises(SystemExit) as exc_info:
            health_check.main(['--url', 'https://app.example.org', '--environment', 'staging'])
        assert exc_info.value.code == 2
