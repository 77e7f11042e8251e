"""
Unit tests for core schemasync components.

Tests configuration management and the data models shared by every stage of
the synchronization pipeline.
"""

import os
import tempfile
import unittest
from pathlib import Path

from pydantic import ValidationError

from schemasync.config import ConfigManager
from schemasync.models import (
    Block,
    BlockKind,
    ChangePlan,
    EntityRole,
    IdentityDirective,
    NameConflict,
    Provenance,
    SchemaDocument,
    TypeAddition,
    TypeRename,
    active_block_ids,
)
from schemasync.planning import NamingRules


class TestConfigManager(unittest.TestCase):
    """Test configuration management functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = Path(self.temp_dir) / "test_config.yaml"

    def tearDown(self):
        """Clean up test fixtures."""
        if self.config_path.exists():
            self.config_path.unlink()
        os.rmdir(self.temp_dir)

    def test_config_creation_with_defaults(self):
        """Test config manager falls back to defaults when file missing."""
        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.default_schema_text, "type Query {\n  _empty: String\n}\n")
        self.assertEqual(config.input_suffix, "Input")
        self.assertEqual(config.result_suffix, "CommandResult")
        self.assertEqual(config.fallback_type_name, "Untitled")
        self.assertTrue(config.declare_identity_directive)
        self.assertEqual(config.log_filename, "schemasync.log")

    def test_config_loading_from_file(self):
        """Test loading configuration from YAML file."""
        test_config = """
naming:
  result_suffix: "Result"

sync:
  declare_identity_directive: false

paths:
  log_file: "custom.log"
"""
        with open(self.config_path, 'w') as f:
            f.write(test_config)

        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.result_suffix, "Result")
        self.assertFalse(config.declare_identity_directive)
        self.assertEqual(config.log_filename, "custom.log")
        # Keys missing from the file keep their defaults
        self.assertEqual(config.input_suffix, "Input")
        self.assertEqual(config.get("logging.level"), "INFO")

    def test_dot_notation_access(self):
        """Test accessing config values with dot notation."""
        config = ConfigManager(str(self.config_path))

        self.assertEqual(config.get("naming.input_suffix"), "Input")
        self.assertEqual(config.get("paths.log_file"), "schemasync.log")
        self.assertIsNone(config.get("nonexistent.key"))
        self.assertEqual(config.get("nonexistent.key", "default"), "default")
        self.assertIn("fallback_name", config.get_section("naming"))
        self.assertEqual(config.get_section("missing"), {})

    def test_config_reload(self):
        """Test configuration reloading."""
        config = ConfigManager(str(self.config_path))
        self.assertEqual(config.input_suffix, "Input")

        with open(self.config_path, 'w') as f:
            f.write('naming:\n  input_suffix: "Payload"\n')

        config.reload()
        self.assertEqual(config.input_suffix, "Payload")

    def test_invalid_yaml_uses_defaults(self):
        """Test that an unreadable file leaves the defaults in place."""
        with open(self.config_path, 'w') as f:
            f.write("naming: [unclosed\n")

        config = ConfigManager(str(self.config_path))
        self.assertEqual(config.input_suffix, "Input")

    def test_naming_rules_from_config(self):
        """Test that naming rules pick up configured suffixes."""
        with open(self.config_path, 'w') as f:
            f.write('naming:\n  input_suffix: "Args"\n  fallback_name: "Unnamed"\n')

        rules = NamingRules.from_config(ConfigManager(str(self.config_path)))
        self.assertEqual(rules.input_suffix, "Args")
        self.assertEqual(rules.result_suffix, "CommandResult")
        self.assertEqual(rules.fallback_name, "Unnamed")


class TestDataModels(unittest.TestCase):
    """Test pydantic data models."""

    def test_block_creation(self):
        """Test creating blocks."""
        block = Block(id="b1", title="Place Order", kind="command")

        self.assertEqual(block.kind, BlockKind.COMMAND)
        self.assertTrue(block.is_command)
        self.assertFalse(Block(id="b2", title="Order Placed", kind=BlockKind.EVENT).is_command)

    def test_block_validation(self):
        """Test that blocks need an id and a known kind."""
        with self.assertRaises(ValidationError):
            Block(id="", title="Nameless", kind="event")
        with self.assertRaises(ValidationError):
            Block(id="b1", title="Unknown", kind="aggregate")

    def test_active_block_ids(self):
        """Test that only non-removed blocks are active."""
        blocks = [
            Block(id="b1", title="A", kind="event"),
            Block(id="b2", title="B", kind="view"),
        ]
        self.assertEqual(active_block_ids(blocks), {"b1", "b2"})

    def test_schema_document_defaults(self):
        """Test schema document defaults and copies."""
        document = SchemaDocument(text="type Query { a: String }")

        self.assertEqual(document.provenance, Provenance.SYSTEM)
        self.assertEqual(document.auxiliary_library_text, "")

        edited = document.with_text("type Query { b: String }", Provenance.EXTERNAL_TEXT_EDIT)
        self.assertEqual(edited.provenance, Provenance.EXTERNAL_TEXT_EDIT)
        self.assertEqual(document.text, "type Query { a: String }")

    def test_schema_document_is_frozen(self):
        """Test that schema documents cannot be modified in place."""
        document = SchemaDocument(text="")
        with self.assertRaises(ValidationError):
            document.text = "type Query { a: String }"

    def test_provenance_external(self):
        """Test external provenance detection."""
        self.assertTrue(Provenance("external-tree-edit").is_external)
        self.assertTrue(Provenance.EXTERNAL_TEXT_EDIT.is_external)
        self.assertFalse(Provenance.SYSTEM.is_external)

    def test_identity_key(self):
        """Test identity key is block id plus role."""
        identity = IdentityDirective(block_id="b1", entity_role="input")
        self.assertEqual(identity.key, ("b1", EntityRole.INPUT))
        self.assertEqual(identity.version, 1)
        self.assertIsNone(identity.block_kind)

    def test_change_plan(self):
        """Test change plan emptiness and summary."""
        plan = ChangePlan()
        self.assertTrue(plan.is_empty)

        plan.conflicts.append(NameConflict(type_name="Checkout", block_id="b2", entity_role="block", holder="b1"))
        self.assertTrue(plan.is_empty)

        plan.renames.append(TypeRename(old_name="A", new_name="B", identity_key=("b1", "block")))
        plan.additions.append(TypeAddition(type_name="C", block_kind="view", block_id="b3", entity_role="block"))
        self.assertFalse(plan.is_empty)
        self.assertEqual(plan.summary(), "1 additions, 1 renames, 0 removals, 1 conflicts")

    def test_name_conflict_description(self):
        """Test name conflict message names both claimants."""
        by_block = NameConflict(type_name="Checkout", block_id="b2", entity_role="block", holder="b1")
        by_user = NameConflict(type_name="Query", block_id="b3", entity_role="block")

        self.assertIn("block b1", by_block.describe())
        self.assertIn("hand-written type", by_user.describe())


if __name__ == '__main__':
    unittest.main()
