import unittest

import gdrivesa


class TestPublicApi(unittest.TestCase):
    def test_top_level_exports_exist(self) -> None:
        self.assertTrue(hasattr(gdrivesa, "DriveClient"))
        self.assertTrue(hasattr(gdrivesa, "ClientConfig"))
        self.assertTrue(hasattr(gdrivesa, "ServiceAccountInfo"))
        self.assertTrue(hasattr(gdrivesa, "TokenManager"))

        self.assertTrue(hasattr(gdrivesa, "RemoteItem"))
        self.assertTrue(hasattr(gdrivesa, "ListOptions"))
        self.assertTrue(hasattr(gdrivesa, "ResolvedPath"))

        self.assertTrue(hasattr(gdrivesa, "GDriveSAError"))
        self.assertTrue(hasattr(gdrivesa, "AuthError"))
        self.assertTrue(hasattr(gdrivesa, "LocalIOError"))

    def test___all___is_defined(self) -> None:
        self.assertTrue(hasattr(gdrivesa, "__all__"))
        self.assertIn("DriveClient", gdrivesa.__all__)
        self.assertIn("GDriveSAError", gdrivesa.__all__)


if __name__ == "__main__":
    unittest.main()
