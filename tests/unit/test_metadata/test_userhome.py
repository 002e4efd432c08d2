"""
Unit tests for the file-backed user home and the user home context.
"""

import pytest
import yaml

from dqstore.metadata import CheckSpec, ColumnSpec, InstanceStatus, PhysicalTableName, SensorParametersSpec
from dqstore.metadata.storage import (
    CONNECTION_SPEC_FILE_NAME,
    FileUserHome,
    FolderTreeNode,
    UserHomeContextFactory,
    YamlSerializer,
)
from dqstore.models.config import StoreConfig
from dqstore.validation import SpecFileError


class CountingSerializer(YamlSerializer):
    """Serializer recording the kinds it writes."""

    def __init__(self):
        self.serialized = []

    def serialize(self, kind, spec):
        self.serialized.append(kind)
        return super().serialize(kind, spec)


def reopen(context):
    return UserHomeContextFactory(StoreConfig(user_home=context.home_path)).open_local_user_home(context.home_path)


def populate(context):
    connection = context.user_home.connections.create_and_add_new("dwh")
    connection.spec.provider_type = "postgresql"
    connection.spec.database = "analytics"
    table = connection.tables.create_and_add_new("public.fact_sales")
    column = ColumnSpec()
    column.checks.put("nulls_count", CheckSpec(sensor=SensorParametersSpec(sensor_definition_name="column/nulls")))
    table.spec.columns.put("id", column)
    connection.tables.create_and_add_new("public.dim_customer")
    context.flush()


@pytest.mark.unit
class TestFileUserHome:
    """Test cases for persisting the user home."""

    def test_empty_user_home(self, user_home_context):
        """Test that a new folder has no connections."""
        assert len(user_home_context.user_home.connections) == 0
        assert not user_home_context.user_home.is_dirty()

    def test_flush_writes_files(self, user_home_context):
        """Test the folder layout written by flush."""
        populate(user_home_context)
        connection_folder = user_home_context.home_path / "sources" / "dwh"

        assert sorted(path.name for path in connection_folder.iterdir()) == [
            CONNECTION_SPEC_FILE_NAME,
            "public.dim_customer.dqotable.yaml",
            "public.fact_sales.dqotable.yaml",
        ]
        document = yaml.safe_load((connection_folder / CONNECTION_SPEC_FILE_NAME).read_text())
        assert document["kind"] == "source"
        assert document["spec"] == {"provider_type": "postgresql", "database": "analytics"}
        assert not user_home_context.user_home.is_dirty()

    def test_reload_in_new_context(self, user_home_context):
        """Test that a second context reads what the first one saved."""
        populate(user_home_context)

        reopened = reopen(user_home_context)
        connection = reopened.user_home.connections.get_by_object_name("dwh")

        assert connection.status == InstanceStatus.UNCHANGED
        assert connection.spec.database == "analytics"
        assert connection.tables.names() == ["public.dim_customer", "public.fact_sales"]
        table = connection.tables.get_by_object_name("public.fact_sales")
        assert table.spec.target.to_physical_table_name() == PhysicalTableName("public", "fact_sales")
        check = table.spec.columns["id"].checks["nulls_count"]
        assert check.sensor_name == "column/nulls"
        assert check.hierarchy_id.segments[:4] == ("connections", "dwh", "tables", "public.fact_sales")
        assert not reopened.user_home.is_dirty()

    def test_check_hash_stable_across_contexts(self, user_home_context):
        """Test that a check keeps its hash after a reload."""
        populate(user_home_context)
        table = user_home_context.user_home.find_table("dwh", PhysicalTableName("public", "fact_sales"))
        original_hash = table.spec.columns["id"].checks["nulls_count"].check_hash()

        reopened = reopen(user_home_context)
        reloaded = reopened.user_home.require_table("dwh", PhysicalTableName("public", "fact_sales"))

        assert reloaded.spec.columns["id"].checks["nulls_count"].check_hash() == original_hash

    def test_modify_and_reflush(self, user_home_context):
        """Test that a modified table is written again."""
        populate(user_home_context)
        reopened = reopen(user_home_context)
        table = reopened.user_home.find_table("dwh", PhysicalTableName("public", "fact_sales"))

        table.spec.columns["id"].disabled = True
        assert reopened.user_home.is_dirty()
        reopened.flush()

        assert table.status == InstanceStatus.UNCHANGED
        final = reopen(user_home_context)
        assert final.user_home.find_table("dwh", PhysicalTableName("public", "fact_sales")) \
            .spec.columns["id"].disabled is True

    def test_only_dirty_specs_are_serialized(self, user_home_context):
        """Test that flush serializes only the changed table."""
        populate(user_home_context)
        serializer = CountingSerializer()
        home_root = FolderTreeNode(user_home_context.home_path)
        user_home = FileUserHome(home_root, serializer)

        connection = user_home.connections.get_by_object_name("dwh")
        assert connection.spec.provider_type == "postgresql"
        for table in connection.tables:
            assert table.spec.target is not None
        connection.tables.get_by_object_name("public.dim_customer").spec.stage = "landing"

        user_home.flush()
        home_root.flush()

        assert serializer.serialized == ["table"]

    def test_nothing_written_without_changes(self, user_home_context):
        """Test that loading and flushing leaves the files untouched."""
        populate(user_home_context)
        table_file = user_home_context.home_path / "sources" / "dwh" / "public.fact_sales.dqotable.yaml"
        modified_before = table_file.stat().st_mtime_ns

        reopened = reopen(user_home_context)
        assert reopened.user_home.find_table("dwh", PhysicalTableName("public", "fact_sales")).spec is not None
        reopened.flush()

        assert table_file.stat().st_mtime_ns == modified_before

    def test_delete_table(self, user_home_context):
        """Test that removing a table deletes its file."""
        populate(user_home_context)
        connection = user_home_context.user_home.connections.get_by_object_name("dwh")

        connection.tables.remove("public.dim_customer")
        user_home_context.flush()

        assert not (user_home_context.home_path / "sources" / "dwh" / "public.dim_customer.dqotable.yaml").exists()
        assert reopen(user_home_context).user_home.connections.get_by_object_name("dwh").tables.names() == [
            "public.fact_sales"]

    def test_delete_connection(self, user_home_context):
        """Test that removing a connection deletes its folder with the tables."""
        populate(user_home_context)

        user_home_context.user_home.connections.remove("dwh")
        user_home_context.flush()

        assert not (user_home_context.home_path / "sources" / "dwh").exists()
        assert len(reopen(user_home_context).user_home.connections) == 0

    def test_recreate_deleted_connection(self, user_home_context):
        """Test that a connection re-created before the flush does not inherit the old tables."""
        populate(user_home_context)
        connections = user_home_context.user_home.connections

        connections.remove("dwh")
        recreated = connections.create_and_add_new("dwh")
        recreated.spec.provider_type = "mysql"
        user_home_context.flush()

        reloaded = reopen(user_home_context).user_home.connections.get_by_object_name("dwh")
        assert reloaded.spec.provider_type == "mysql"
        assert reloaded.tables.names() == []

    def test_folder_without_connection_file_is_ignored(self, user_home_context):
        """Test that stray folders in sources are not connections."""
        populate(user_home_context)
        (user_home_context.home_path / "sources" / "notes").mkdir()

        assert reopen(user_home_context).user_home.connections.names() == ["dwh"]

    def test_corrupt_table_file(self, user_home_context):
        """Test that a corrupt spec file is reported when the table is loaded."""
        populate(user_home_context)
        table_file = user_home_context.home_path / "sources" / "dwh" / "public.fact_sales.dqotable.yaml"
        table_file.write_text("apiVersion: dqo/v1\nkind: source\n")

        table = reopen(user_home_context).user_home.find_table("dwh", PhysicalTableName("public", "fact_sales"))

        with pytest.raises(SpecFileError) as exc_info:
            table.spec
        assert exc_info.value.file_path == str(table_file)


@pytest.mark.unit
class TestUserHomeContextFactory:
    """Test cases for opening user homes."""

    def test_open_configured_user_home(self, temp_dir):
        """Test that the configured folder is created and used."""
        factory = UserHomeContextFactory(StoreConfig(user_home=temp_dir / "configured", completion_cache_size=7))

        context = factory.open_local_user_home()

        assert context.home_path == temp_dir / "configured"
        assert context.home_path.is_dir()
        assert context.data_path == temp_dir / "configured" / ".data"
        assert context.completion_cache.max_size == 7

    def test_open_from_config_file(self, config_files, temp_dir):
        """Test that the factory falls back to the global configuration."""
        from dqstore.config import set_config_path

        set_config_path(config_files["config"])

        context = UserHomeContextFactory().open_local_user_home()

        assert context.home_path == temp_dir / "home"
        assert context.completion_cache.max_size == 50
