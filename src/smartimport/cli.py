"""Interface en ligne de commande SmartImport."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from smartimport import __version__
from smartimport.config import Config, SmartImportError
from smartimport.io_files import read_input_text, save_items
from smartimport.pipeline import Importer
from smartimport.report import build_report_df, print_report_console
from smartimport.targets import TARGETS, get_target
from smartimport.templates import generate_template


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_config(config_path: str | None) -> Config:
    return Config.load(config_path) if config_path else Config()


def _filename_hint(input_path: str) -> str | None:
    return None if input_path == "-" else Path(input_path).name


def cmd_targets() -> int:
    """Liste les cibles connues et leurs champs."""
    for t in TARGETS:
        print(f"{t.emoji} {t.id} ({t.label})")
        print(f"    requis:     {', '.join(t.required_fields)}")
        print(f"    optionnels: {', '.join(t.optional_fields)}")
    return 0


def cmd_template(target: str, output_path: str | None) -> int:
    """Affiche ou écrit un modèle CSV vide pour une cible."""
    template = generate_template(get_target(target))
    if output_path:
        Path(output_path).write_text(template + "\n", encoding="utf-8")
        print(f"Modèle écrit: {output_path}")
    else:
        print(template)
    return 0


def cmd_detect(input_path: str, *, config_path: str | None = None) -> int:
    """Affiche le format détecté et le classement des cibles."""
    config = _load_config(config_path)
    text = read_input_text(input_path, encoding=config.encoding, sheet_name=config.sheet)
    importer = Importer(config)
    table = importer.parse(text, _filename_hint(input_path))

    print(f"Format: {table.format}")
    print(f"Lignes: {table.row_count}")
    print(f"Champs: {', '.join(table.source_fields) or '(aucun)'}")
    if table.is_empty:
        print("Rien d'importable trouvé.")
        return 0

    print("\nClassement:")
    for i, s in enumerate(importer.classify(table), start=1):
        missing = f"  (requis manquants: {', '.join(s.missing_required)})" if s.missing_required else ""
        print(f"  [{i:2d}] {s.target:<15} score={s.score}{missing}")
    return 0


def cmd_run(
    input_path: str,
    output_path: str | None,
    *,
    config_path: str | None = None,
    target: str | None = None,
    dry_run: bool = False,
) -> int:
    """Exécute le pipeline SmartImport."""
    config = _load_config(config_path)
    text = read_input_text(input_path, encoding=config.encoding, sheet_name=config.sheet)

    importer = Importer(config)
    result = importer.run(text, _filename_hint(input_path), target=target)

    print_report_console(result)

    if not result.has_data:
        return 0

    if dry_run:
        print("Mode dry-run: pas d'écriture du fichier de sortie.")
        return 0

    if not output_path:
        print("Erreur: --output requis en mode non dry-run.")
        return 1

    save_items(output_path, result.items, report_df=build_report_df(result, config))
    print(f"Fichier de sortie: {output_path} ({result.accepted_count} enregistrement(s))")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="smartimport",
        description="Import de données en vrac : détection du format, de la cible et des champs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Journalisation détaillée")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    # targets
    subparsers.add_parser("targets", help="Lister les cibles d'import")

    # template
    p_tpl = subparsers.add_parser("template", help="Générer un modèle CSV vide")
    p_tpl.add_argument("target", help="Identifiant de la cible")
    p_tpl.add_argument("--output", "-o", help="Fichier de sortie (sinon stdout)")

    # detect
    p_detect = subparsers.add_parser("detect", help="Détecter le format et classer les cibles")
    p_detect.add_argument("file", help="Fichier à analyser (- pour stdin)")
    p_detect.add_argument("--config", "-c", help="Fichier config JSON")

    # run
    p_run = subparsers.add_parser("run", help="Importer un fichier")
    p_run.add_argument("file", help="Fichier à importer (- pour stdin)")
    p_run.add_argument("--config", "-c", help="Fichier config JSON")
    p_run.add_argument("--target", "-t", help="Cible imposée (sinon détection automatique)")
    p_run.add_argument("--output", "-o", help="Fichier de sortie (.json, .csv, .xlsx)")
    p_run.add_argument("--dry-run", action="store_true", help="Ne pas écrire le fichier de sortie")

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        if args.command == "targets":
            return cmd_targets()

        if args.command == "template":
            return cmd_template(args.target, args.output)

        if args.command == "detect":
            return cmd_detect(args.file, config_path=args.config)

        if args.command == "run":
            if not args.dry_run and not args.output:
                parser.error("--output requis sauf en --dry-run")
            return cmd_run(
                args.file,
                args.output,
                config_path=args.config,
                target=args.target,
                dry_run=args.dry_run,
            )
    except SmartImportError as e:
        print(f"Erreur: {e}")
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
