"""
Schema synchronization controller.

The controller owns the current schema document. Block changes from the canvas
come in through ``sync``; edits from the embedded schema editor come in
through ``update_document``. Every stored snapshot carries a provenance tag so
the editor can tell its own edits apart from reconciliations.
"""

import collections.abc
import logging
from typing import Any, Callable, List, Optional, Tuple, Union

from ..config import ConfigManager, get_config
from ..importers import BaseImporter, ProjectImporter, export_payload
from ..models import Block, ChangePlan, Provenance, SchemaDocument
from ..planning import NamingRules, apply_plan, compute_plan
from ..sdl import ParseError, SchemaAST, SerializeError, parse, parse_safe, serialize


DocumentListener = Callable[[SchemaDocument], None]


class SchemaSyncController:
    """
    Keeps a schema document in step with the blocks on the canvas.

    Collaborators receive the controller instance explicitly; there is no
    process-wide accessor.
    """

    def __init__(self, document: Optional[SchemaDocument] = None, config: Optional[ConfigManager] = None):
        """
        Initialize the controller.

        Args:
            document: Initial document; defaults to the configured starter schema
            config: Configuration to use; defaults to the global configuration
        """
        self.config = config or get_config()
        self.naming = NamingRules.from_config(self.config)
        self._document = document or SchemaDocument(text=self.config.default_schema_text)
        self._listeners: List[DocumentListener] = []
        self.rename_notification: Optional[str] = None
        self.last_plan: Optional[ChangePlan] = None

    @property
    def document(self) -> SchemaDocument:
        return self._document

    @property
    def schema_text(self) -> str:
        """The current schema text, as used for export."""
        return self._document.text

    def get_ast(self) -> SchemaAST:
        """Parse the current document; malformed text gives an empty AST."""
        return parse_safe(self._document.text)

    def subscribe(self, listener: DocumentListener) -> None:
        """Call ``listener`` with every newly stored document."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: DocumentListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def sync(self, blocks: List[Block]) -> bool:
        """
        Reconcile the stored document with ``blocks``.

        Runs on every block-registry change, so failures never propagate: a
        document that cannot be parsed or printed is left exactly as it was.

        Args:
            blocks: Blocks currently on the canvas

        Returns:
            True if a new document was stored, False otherwise
        """
        try:
            updated, plan = self._reconcile(self._document, blocks)
        except ParseError as e:
            logging.warning(f"Schema sync skipped, the current document does not parse: {e}")
            return False
        except SerializeError as e:
            logging.error(f"Schema sync skipped, the reconciled document is invalid: {e}", exc_info=True)
            return False

        if updated is None:
            logging.debug("Schema already matches the blocks, nothing to store")
            return False

        self.rename_notification = None
        self._store(updated)
        self._announce_renames(plan)
        return True

    def update_document(self, document: Union[SchemaDocument, collections.abc.Mapping]) -> SchemaDocument:
        """
        Store an externally originated snapshot.

        External provenance tags are kept so the editor can recognise its own
        edits; anything else is stored as ``system``.

        Args:
            document: A SchemaDocument, or the editor's record with ``text``,
                ``auxiliaryLibraryText`` and ``provenance`` keys

        Returns:
            The stored document
        """
        incoming = _coerce_document(document)
        if not incoming.provenance.is_external:
            incoming = incoming.model_copy(update={"provenance": Provenance.SYSTEM})

        logging.info(f"Schema document updated (provenance: {incoming.provenance.value})")
        self.rename_notification = None
        self._store(incoming)
        return incoming

    def dismiss_notification(self) -> None:
        self.rename_notification = None

    def export_state(self, blocks: List[Block]) -> dict:
        """Build the project payload holding the schema and the blocks."""
        return export_payload(self._document, blocks)

    def import_state(self, payload: Union[BaseImporter, collections.abc.Mapping]) -> List[Block]:
        """
        Restore a saved project and run one sync pass with its blocks.

        This is a user-initiated path: errors propagate to the caller, and
        nothing is stored unless the whole import succeeds.

        Raises:
            ParseError: if the saved schema (or the current one, when the
                project has no schema) does not parse
            SerializeError: if the reconciled document cannot be printed

        Returns:
            The imported blocks
        """
        importer = payload if isinstance(payload, BaseImporter) else ProjectImporter(payload)
        document = importer.get_document()
        blocks = importer.get_blocks()

        if document is not None:
            parse(document.text)
        base = document or self._document

        updated, plan = (None, None)
        if blocks:
            updated, plan = self._reconcile(base, blocks)

        final = updated or base
        if final is not self._document:
            self.rename_notification = None
            self._store(final)
        self._announce_renames(plan)

        logging.info(f"Imported project with {len(blocks)} blocks")
        return blocks

    def _reconcile(self, document: SchemaDocument,
                   blocks: List[Block]) -> Tuple[Optional[SchemaDocument], ChangePlan]:
        ast = parse(document.text)
        plan = compute_plan(ast, blocks, self.naming)
        self.last_plan = plan
        if plan.is_empty:
            return None, plan

        text = serialize(apply_plan(ast, plan, self.config.declare_identity_directive))
        if text == document.text:
            return None, plan
        return document.with_text(text, Provenance.SYSTEM), plan

    def _announce_renames(self, plan: Optional[ChangePlan]) -> None:
        if plan is None or not plan.renames:
            return
        renamed = ", ".join(f"{rename.old_name} → {rename.new_name}" for rename in plan.renames)
        self.rename_notification = f"Schema types renamed: {renamed}"
        logging.info(self.rename_notification)

    def _store(self, document: SchemaDocument) -> None:
        self._document = document
        for listener in list(self._listeners):
            try:
                listener(document)
            except Exception as e:
                logging.error(f"Schema document listener failed: {e}", exc_info=True)


def _coerce_document(data: Any) -> SchemaDocument:
    if isinstance(data, SchemaDocument):
        return data
    if not isinstance(data, collections.abc.Mapping):
        raise TypeError(f"Expected a SchemaDocument or a mapping, got {type(data).__name__}")

    text = data.get("text", data.get("code", ""))
    auxiliary = data.get("auxiliaryLibraryText", data.get("auxiliary_library_text", data.get("libraries", "")))
    try:
        provenance = Provenance(data.get("provenance"))
    except ValueError:
        provenance = Provenance.SYSTEM
    return SchemaDocument(text=text or "", auxiliary_library_text=auxiliary or "", provenance=provenance)
