import unittest

from app.config import Settings, validate_settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        settings = Settings(_env_file=None)
        self.assertEqual(settings.STRIPE_API_VERSION, "2023-08-16")
        self.assertEqual(settings.IDENTITY_PROFILE_PATH, "user/profile")
        self.assertEqual(settings.IDENTITY_VALIDATE_PATH, "user/validate")
        self.assertEqual(settings.REQUEST_ID_HEADER, "X-Request-ID")

    def test_identity_url_gets_trailing_slash(self):
        settings = Settings(IDENTITY_SERVICE_URL="https://shop.test/api")
        self.assertEqual(settings.IDENTITY_SERVICE_URL, "https://shop.test/api/")

    def test_allowed_origins_split(self):
        settings = Settings(ALLOWED_ORIGINS="https://a.test, https://b.test,")
        self.assertEqual(settings.allowed_origins, ["https://a.test", "https://b.test"])

    def test_production_requires_stripe_key(self):
        with self.assertRaises(ValueError):
            validate_settings(Settings(ENVIRONMENT="production", STRIPE_SECRET_KEY=None))
        validate_settings(Settings(ENVIRONMENT="production", STRIPE_SECRET_KEY="sk_live_x"))
        validate_settings(Settings(ENVIRONMENT="development", STRIPE_SECRET_KEY=None))


if __name__ == "__main__":
    unittest.main()
