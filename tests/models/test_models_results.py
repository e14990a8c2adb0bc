import unittest

from gdrivesa.models import ChildrenResult, CreatedItem, ResolvedPath


class TestResults(unittest.TestCase):
    def test_resolved_path_defaults(self) -> None:
        r = ResolvedPath(folder_id="root")
        self.assertEqual(r.folder_id, "root")
        self.assertIsNone(r.parent_id)

    def test_children_result(self) -> None:
        r = ChildrenResult(items=[], folder_id="A", parent_id="root")
        self.assertEqual(r.items, [])
        self.assertEqual(r.parent_id, "root")

    def test_created_item_defaults(self) -> None:
        r = CreatedItem(item_id="F1")
        self.assertEqual(r.data, {})


if __name__ == "__main__":
    unittest.main()
