"""
Main module for the node importer.

This module provides the main entry point for the node importer: it imports the
vocabularies and nodes of an RDF/XML ontology into a content store.
"""
import argparse
import logging
import os
import sys
import time as timing
from typing import Any, Optional

from node_importer.config import AVAILABLE_STRATEGIES, DEFAULT_STRATEGY, DEFAULT_USER_ID
from node_importer.errors import ClassificationError, NodeImporterError
from node_importer.population import (
    EntityFlattener, ImportContext, NodeImporter, ReferenceResolver,
    VocabularyBuilder, VocabularyImporter
)
from node_importer.query import ClosureEngine, OntologyIndex, make_strategy
from node_importer.store import ContentStore, InMemoryContentStore
from node_importer.utils.logging import main_logger, configure_logging, log_suppressed_message_counts
from node_importer.utils.types import local_name, require


def run_import(file_path: str,
               store: Optional[ContentStore] = None,
               classes_as_nodes: bool = False,
               only_leaf_classes_as_nodes: bool = False,
               overwrite: bool = False,
               user_id: Any = DEFAULT_USER_ID,
               strategy: str = DEFAULT_STRATEGY) -> ImportContext:
    """
    Imports one ontology document into a content store.

    Vocabularies are imported first, then one node per individual, then the
    queued tag parents and node references are resolved.

    Args:
        file_path: Path of the RDF/XML document
        store: Content store to write to (a new InMemoryContentStore if None)
        classes_as_nodes: Also import the classes below each bundle class as nodes
        only_leaf_classes_as_nodes: With classes_as_nodes, only import leaf classes
        overwrite: Clear and reuse vocabularies that already exist
        user_id: Owner of created nodes and files
        strategy: Name of the hierarchy strategy

    Returns:
        The ImportContext of the run

    Raises:
        NodeImporterError: On errors that are fatal to the run
    """
    require(file_path, "file_path")
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"Ontology file not found: {file_path}")

    index = OntologyIndex(file_path)
    closure = ClosureEngine(index, make_strategy(strategy, index))
    context = ImportContext(
        store if store is not None else InMemoryContentStore(),
        overwrite=overwrite,
        user_id=user_id
    )

    # --- Pass 1a: Vocabularies and tags ---
    main_logger.info("--- Import Pass 1: Vocabularies ---")
    vocabulary_importer = VocabularyImporter(context)
    vids = VocabularyBuilder(closure, vocabulary_importer).build()
    main_logger.info(f"Imported {len(vids)} vocabularies.")

    # --- Pass 1b: Nodes ---
    main_logger.info("--- Import Pass 1: Nodes ---")
    flattener = EntityFlattener(
        closure,
        classes_as_nodes=classes_as_nodes,
        only_leaf_classes_as_nodes=only_leaf_classes_as_nodes
    )
    node_importer = NodeImporter(context)

    main_logger.info("Collecting nodes...")
    individuals = flattener.get_individuals()
    main_logger.info(f"Found {len(individuals)} nodes.")

    for individual in individuals:
        main_logger.debug(f"Inserting {local_name(individual)}...")
        try:
            record = flattener.flatten(individual)
        except ClassificationError as e:
            main_logger.warning(f"Skipping {local_name(individual)}: {e}")
            context.record_skip(individual, str(e))
            continue
        node_importer.create_node(record)

    # --- Pass 2: Deferred references ---
    main_logger.info("--- Import Pass 2: Tag parents and node references ---")
    ReferenceResolver(context, vocabulary_importer, node_importer).resolve()

    main_logger.info(f"Scanned {file_path} {index.scan_count} times.")
    return context


def main_import(file_path: str,
                output_path: Optional[str] = None,
                classes_as_nodes: bool = False,
                only_leaf_classes_as_nodes: bool = False,
                overwrite: bool = False,
                user_id: Any = DEFAULT_USER_ID,
                strategy: str = DEFAULT_STRATEGY,
                store: Optional[ContentStore] = None) -> bool:
    """
    Main function to run an import with timing, reporting and optional JSON export.

    Args:
        file_path: Path of the RDF/XML document
        output_path: Optional path of a JSON export of the in-memory store
        (remaining args as in run_import)

    Returns:
        bool: True on success, False on failure
    """
    start_time = timing.time()
    main_logger.info("--- Node Import Process Started ---")
    main_logger.info(f"Ontology file: {file_path}")
    main_logger.info(f"Hierarchy strategy: {strategy}")
    main_logger.info(f"Classes as nodes: {classes_as_nodes} (only leaf classes: {only_leaf_classes_as_nodes})")
    main_logger.info(f"Overwrite vocabularies: {overwrite}")

    try:
        context = run_import(
            file_path, store,
            classes_as_nodes=classes_as_nodes,
            only_leaf_classes_as_nodes=only_leaf_classes_as_nodes,
            overwrite=overwrite,
            user_id=user_id,
            strategy=strategy
        )
        context.log_import_report()

        if output_path:
            if isinstance(context.store, InMemoryContentStore):
                context.store.save_json(output_path)
            else:
                main_logger.warning(f"Export to {output_path} skipped: only the in-memory store can be exported.")
        return True

    except NodeImporterError as e:
        main_logger.error(f"Import aborted: {e}")
        return False

    except (OSError, ValueError) as e:
        main_logger.error(f"Import failed: {e}", exc_info=True)
        return False

    except Exception:
        main_logger.exception("A critical error occurred during the import process.")
        return False

    finally:
        end_time = timing.time()
        main_logger.info(f"--- Node Import Finished --- Total time: {end_time - start_time:.2f} seconds")
        log_suppressed_message_counts()


def main():
    """Parses command line arguments and runs the import."""
    parser = argparse.ArgumentParser(description="Import vocabularies and nodes from an OWL ontology (RDF/XML).")
    parser.add_argument("ontology_file", help="Path to the ontology file in RDF/XML syntax (e.g., content.owl).")
    parser.add_argument("--output", default=None, help="Path to write the imported entities to as JSON.")
    parser.add_argument("--classes-as-nodes", action="store_true", help="Also import the subclasses of each bundle class as nodes.")
    parser.add_argument("--only-leaf-classes", action="store_true", dest="only_leaf_classes_as_nodes",
                        help="With --classes-as-nodes, only import classes without subclasses.")
    parser.add_argument("--overwrite", action="store_true", help="Clear and reuse vocabularies that already exist.")
    parser.add_argument("--user-id", type=int, default=DEFAULT_USER_ID, help=f"Owner of created nodes and files (default: {DEFAULT_USER_ID}).")
    parser.add_argument("--strategy", default=DEFAULT_STRATEGY, choices=AVAILABLE_STRATEGIES,
                        help=f"Hierarchy strategy (default: {DEFAULT_STRATEGY}).")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose (DEBUG level) logging.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress INFO level logging.")

    args = parser.parse_args()

    # Setup Logging Level
    log_level = logging.INFO
    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.WARNING

    configure_logging(log_level=log_level, log_file=args.log_file)

    success = main_import(
        args.ontology_file, args.output,
        classes_as_nodes=args.classes_as_nodes,
        only_leaf_classes_as_nodes=args.only_leaf_classes_as_nodes,
        overwrite=args.overwrite,
        user_id=args.user_id,
        strategy=args.strategy
    )

    if success:
        main_logger.info("Node import process completed.")
        sys.exit(0)
    else:
        main_logger.error("Node import process failed or encountered errors.")
        sys.exit(1)


if __name__ == "__main__":
    main()
