"""
Tests for the gunicorn settings and the run.py entry point.
"""
import runpy
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


class TestGunicornConfig:

    def test_binds_to_port(self, monkeypatch):
        monkeypatch.setenv('PORT', '9123')
        monkeypatch.setenv('GUNICORN_WORKERS', '3')

        settings = runpy.run_path(str(ROOT / 'gunicorn.conf.py'))

        assert settings['bind'] == '0.0.0.0:9123'
        assert settings['workers'] == 3
        assert settings['proc_name'] == 'brewline'
        assert settings['preload_app'] is False

    def test_defaults(self, monkeypatch):
        for name in ('PORT', 'GUNICORN_WORKERS', 'GUNICORN_TIMEOUT', 'LOG_LEVEL'):
            monkeypatch.delenv(name, raising=False)

        settings = runpy.run_path(str(ROOT / 'gunicorn.conf.py'))

        assert settings['bind'] == '0.0.0.0:8080'
        assert settings['timeout'] == 60
        assert settings['loglevel'] == 'info'
        assert 'on_starting' not in settings


class TestRunModule:

    def test_builds_app_from_flask_env(self, monkeypatch):
        monkeypatch.setenv('FLASK_ENV', 'testing')

        module = runpy.run_path(str(ROOT / 'run.py'))

        assert module['app'].config['TESTING'] is True
        assert 'profile.generate_profile' in module['app'].view_functions
