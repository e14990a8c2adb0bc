import argparse
import os
import tempfile
import time
import unittest
from pathlib import Path

from gdrivesa import ClientConfig, DriveClient


def _env(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise unittest.SkipTest(f"Missing env var: {name}")
    return value


class TestGoogleDriveIntegration(unittest.TestCase):
    """
    Integration test with real Google Drive.

    Required env vars:
        - GDRIVESA_SECRET_JSON: path to the service account JSON key
        - GDRIVESA_TEST_FOLDER: absolute Drive path of a sandbox folder ("/sandbox")

    Optional:
        - GDRIVESA_IMPERSONATE: user to act as (domain-wide delegation)
    """

    @classmethod
    def setUpClass(cls) -> None:
        cls.secret_json = _env("GDRIVESA_SECRET_JSON")
        cls.test_folder = _env("GDRIVESA_TEST_FOLDER")
        cls.impersonate_as = os.environ.get("GDRIVESA_IMPERSONATE", "").strip() or None

    def test_folder_upload_download_delete(self) -> None:
        client = DriveClient(
            self.secret_json,
            impersonate_as=self.impersonate_as,
            config=ClientConfig(http_retry_count=2, http_retry_interval=2),
        )
        self.addCleanup(client.close)

        # 1) resolve sandbox
        resolved = client.resolve_path(self.test_folder)
        self.assertIsNotNone(resolved, client.last_error)

        # 2) scratch folder
        folder = client.create_folder(f"gdrivesa_it_{int(time.time())}", resolved.folder_id)
        self.assertIsNotNone(folder, client.last_error)
        self.addCleanup(client.delete, folder.item_id)

        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            src_file = tmp_path / "hello.txt"
            src_file.write_text("hello from gdrivesa integration test\n", encoding="utf-8")

            # 3) upload, then find it through the path API
            created = client.new_file(str(src_file), folder.item_id, {"description": "it"})
            self.assertIsNotNone(created, client.last_error)

            listed = client.children(f"{self.test_folder}/{folder.data['title']}")
            self.assertIsNotNone(listed, client.last_error)
            self.assertIn(created.item_id, [i.item_id for i in listed.items])

            # 4) replace content and download it back
            src_file.write_text("updated\n", encoding="utf-8")
            self.assertEqual(client.update_file(created.item_id, str(src_file)), created.item_id)

            item = next(i for i in listed.items if i.item_id == created.item_id)
            if item.download_url:
                dst_file = tmp_path / "downloaded.txt"
                self.assertTrue(client.download(item, str(dst_file)), client.last_error)

            # 5) delete
            self.assertEqual(client.delete(created.item_id), created.item_id)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose unittest output",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = _parse_args()
    unittest.main(verbosity=2 if args.verbose else 1)
