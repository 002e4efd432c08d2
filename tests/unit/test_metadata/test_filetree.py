"""
Unit tests for the virtual file tree.
"""

import pytest

from dqstore.metadata.storage import FileContent, FileTreeNodeStatus, FolderTreeNode


@pytest.mark.unit
class TestFolderTreeNode:
    """Test cases for FolderTreeNode and FileTreeNode."""

    def test_lists_existing_files_lazily(self, temp_dir):
        """Test that folders are listed on first access."""
        (temp_dir / "a.yaml").write_text("a: 1\n")
        (temp_dir / "sub").mkdir()
        folder = FolderTreeNode(temp_dir)

        (temp_dir / "b.yaml").write_text("b: 2\n")

        assert [node.file_name for node in folder.files()] == ["a.yaml", "b.yaml"]
        assert [sub.folder_name for sub in folder.sub_folders()] == ["sub"]
        assert folder.get_child_file_by_file_name("a.yaml").content.text == "a: 1\n"

    def test_file_removed_before_reading(self, temp_dir):
        """Test that a listed file that can no longer be read raises the OS error."""
        (temp_dir / "a.yaml").write_text("a: 1\n")
        folder = FolderTreeNode(temp_dir)
        node = folder.get_child_file_by_file_name("a.yaml")
        (temp_dir / "a.yaml").unlink()

        with pytest.raises(FileNotFoundError):
            node.content

    def test_missing_folder_is_empty(self, temp_dir):
        """Test that a folder that does not exist yet has no children."""
        folder = FolderTreeNode(temp_dir / "missing")

        assert folder.files() == []
        assert folder.get_sub_folder("any") is None

    def test_new_file_written_on_flush(self, temp_dir):
        """Test that added files are written only by flush."""
        folder = FolderTreeNode(temp_dir)
        sub_folder = folder.get_or_add_sub_folder("sources")

        node = sub_folder.add_child_file("connection.yaml", FileContent("kind: source\n"))

        assert node.status == FileTreeNodeStatus.NEW
        assert not (temp_dir / "sources" / "connection.yaml").exists()

        folder.flush()

        assert (temp_dir / "sources" / "connection.yaml").read_text() == "kind: source\n"
        assert node.status == FileTreeNodeStatus.UNCHANGED

    def test_replacing_new_file_keeps_it_new(self, temp_dir):
        """Test that changing an unsaved file does not turn it into a modified one."""
        folder = FolderTreeNode(temp_dir)
        folder.add_child_file("a.yaml", FileContent("1"))

        node = folder.add_child_file("a.yaml", FileContent("2"))

        assert node.status == FileTreeNodeStatus.NEW
        assert node.content == FileContent("2")

    def test_modify_existing_file(self, temp_dir):
        """Test that changed content is written back."""
        (temp_dir / "a.yaml").write_text("old")
        folder = FolderTreeNode(temp_dir)

        folder.get_child_file_by_file_name("a.yaml").change_content(FileContent("new"))
        assert folder.get_child_file_by_file_name("a.yaml").status == FileTreeNodeStatus.MODIFIED
        folder.flush()

        assert (temp_dir / "a.yaml").read_text() == "new"

    def test_delete_file(self, temp_dir):
        """Test that deleted files are hidden and removed by flush."""
        (temp_dir / "a.yaml").write_text("a")
        folder = FolderTreeNode(temp_dir)

        assert folder.delete_child_file("a.yaml") is True
        assert folder.get_child_file_by_file_name("a.yaml") is None
        assert folder.delete_child_file("a.yaml") is False
        assert (temp_dir / "a.yaml").exists()

        folder.flush()

        assert not (temp_dir / "a.yaml").exists()

    def test_re_add_deleted_file(self, temp_dir):
        """Test that a deleted file added again is rewritten instead of removed."""
        (temp_dir / "a.yaml").write_text("old")
        folder = FolderTreeNode(temp_dir)
        folder.delete_child_file("a.yaml")

        node = folder.add_child_file("a.yaml", FileContent("new"))
        folder.flush()

        assert node.status == FileTreeNodeStatus.UNCHANGED
        assert (temp_dir / "a.yaml").read_text() == "new"

    def test_delete_folder_on_flush(self, temp_dir):
        """Test that a folder marked for deletion is removed with its content."""
        (temp_dir / "dwh").mkdir()
        (temp_dir / "dwh" / "t.yaml").write_text("t")
        folder = FolderTreeNode(temp_dir)

        folder.get_sub_folder("dwh").delete_on_flush = True
        assert folder.get_sub_folder("dwh") is None

        folder.flush()

        assert not (temp_dir / "dwh").exists()
        assert folder.sub_folders() == []

    def test_recreated_folder_starts_empty(self, temp_dir):
        """Test that a folder re-created before the flush loses its old files."""
        (temp_dir / "dwh").mkdir()
        (temp_dir / "dwh" / "old.yaml").write_text("old")
        folder = FolderTreeNode(temp_dir)
        folder.get_sub_folder("dwh").delete_on_flush = True

        recreated = folder.get_or_add_sub_folder("dwh")
        recreated.add_child_file("new.yaml", FileContent("new"))

        assert [node.file_name for node in recreated.files()] == ["new.yaml"]
        folder.flush()
        assert sorted(path.name for path in (temp_dir / "dwh").iterdir()) == ["new.yaml"]

    def test_unreadable_file(self, temp_dir):
        """Test that a file that vanished before it was read raises the OS error."""
        (temp_dir / "a.yaml").write_text("a")
        folder = FolderTreeNode(temp_dir)
        node = folder.get_child_file_by_file_name("a.yaml")
        (temp_dir / "a.yaml").unlink()

        with pytest.raises(FileNotFoundError):
            node.content
