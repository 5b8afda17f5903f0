import runpy
from unittest.mock import patch

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase

SETTINGS_PATH = str(settings.BASE_DIR / 'config' / 'settings.py')

PRODUCTION_ENV = {
    'DEBUG': 'False',
    'SECRET_KEY': 'a-long-production-secret-for-supchaissac',
    'HEALTHCHECK_TOKEN': 'current-token',
    'ALLOWED_HOSTS': 'supchaissac.example.org',
    'TRUSTED_PROXY_CIDRS': '10.0.0.0/8',
    'HEALTHCHECK_ALLOWLIST_CIDRS': '10.0.0.0/8',
}


class ProductionSettingsGuardTests(SimpleTestCase):

    def load_settings(self, **overrides):
        env = {**PRODUCTION_ENV, **overrides}
        with patch.dict('os.environ', env, clear=True), patch('dotenv.load_dotenv'):
            return runpy.run_path(SETTINGS_PATH)

    def test_proxy_cidrs_must_be_declared(self):
        env = dict(PRODUCTION_ENV)
        del env['TRUSTED_PROXY_CIDRS']

        with patch.dict('os.environ', env, clear=True), patch('dotenv.load_dotenv'):
            with self.assertRaisesMessage(ImproperlyConfigured, 'TRUSTED_PROXY_CIDRS must be explicitly set'):
                runpy.run_path(SETTINGS_PATH)

    def test_empty_proxy_cidrs_are_refused(self):
        with self.assertRaisesMessage(ImproperlyConfigured, 'TRUSTED_PROXY_CIDRS must be set when DEBUG=False.'):
            self.load_settings(TRUSTED_PROXY_CIDRS=' , ')

    def test_empty_health_allowlist_is_refused(self):
        with self.assertRaisesMessage(
            ImproperlyConfigured, 'HEALTHCHECK_ALLOWLIST_CIDRS must be set when DEBUG=False.'
        ):
            self.load_settings(HEALTHCHECK_ALLOWLIST_CIDRS='')

    def test_invalid_cidr_is_refused(self):
        with self.assertRaisesMessage(ImproperlyConfigured, 'contains invalid CIDR'):
            self.load_settings(HEALTHCHECK_ALLOWLIST_CIDRS='not-a-network')
