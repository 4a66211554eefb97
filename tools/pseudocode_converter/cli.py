#!/usr/bin/env python3
"""
Command line interface for the Pseudocode Converter

    pseudoconv convert notes.txt --target java
    pseudoconv detect --text "SET x TO 5"
    pseudoconv parse notes.txt
    pseudoconv languages
    pseudoconv config validate --path config.yaml
"""

import argparse
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

import yaml

from .config import Config, ConfigManager
from .detector import detect_language
from .emitters import AnnotationOptions
from .exceptions import ConfigurationError, ConverterError
from .languages import AUTO, SOURCE_CAPABILITIES, SourceLanguage, TargetLanguage
from .models import tree_to_dicts
from .parser import ParseOptions
from .translator import convert, list_targets, parse_with_result

logger = logging.getLogger(__name__)
PACKAGE_LOGGER = "pseudocode_converter"


def validate_config(path: str, lenient: bool = False) -> tuple[int, dict]:
    """
    Validate a configuration file.

    The file is parsed directly (no silent fallback to defaults) and checked
    with the runtime validators. With lenient=True problems are reported as
    warnings and the exit code is 0.

    Returns:
      (exit_code, result_dict) where result_dict is
      {"errors": [...], "warnings": [...], "path": path}
    """
    p = Path(path)
    if not p.is_file():
        return 1, {"errors": [f"File not found or unreadable: {path}"], "warnings": [], "path": str(p)}

    try:
        with open(p, encoding="utf-8") as f:
            raw = yaml.safe_load(f) if p.suffix.lower() in (".yaml", ".yml") else json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        return 1, {
            "errors": [f"Failed to read/parse configuration: {e}".strip()],
            "warnings": [],
            "path": str(p),
        }

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        return 1, {
            "errors": ["Configuration file must contain a mapping/object at the top level"],
            "warnings": [],
            "path": str(p),
        }

    try:
        cfg = Config.from_dict(raw)
    except TypeError as e:
        return 1, {"errors": [f"Invalid configuration file: {e}"], "warnings": [], "path": str(p)}

    problems = ConfigManager.validate(cfg)
    if lenient:
        return 0, {"errors": [], "warnings": problems, "path": str(p)}
    return (1 if problems else 0), {"errors": problems, "warnings": [], "path": str(p)}


def _read_input(args) -> str:
    if getattr(args, "text", None) is not None:
        return args.text
    if args.input in (None, "-"):
        return sys.stdin.read()
    return Path(args.input).read_text(encoding="utf-8")


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


class ConverterCLI:
    """The `pseudoconv` command"""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="pseudoconv",
            description="Convert natural-language pseudocode into several programming languages",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
        parser.add_argument("--config", help="Path to configuration file (YAML or JSON)")

        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        def add_input(sub: argparse.ArgumentParser) -> None:
            sub.add_argument("input", nargs="?", help="Input file ('-' or omitted: stdin)")
            sub.add_argument("--text", help="Convert this text instead of reading a file")

        convert_parser = subparsers.add_parser("convert", help="Convert text to a target language")
        add_input(convert_parser)
        convert_parser.add_argument("-t", "--target", help="Target language (default from config)")
        convert_parser.add_argument("-s", "--source", help="Source language (default: auto-detect)")
        convert_parser.add_argument("-o", "--output", help="Write the result to this file")
        convert_parser.add_argument("--indent-size", type=int, help="Indent characters per level")
        convert_parser.add_argument("--indent-char", choices=["space", "tab"], help="Indent character")
        convert_parser.add_argument(
            "--no-comments", action="store_true", help="Drop comment lines from the output"
        )
        convert_parser.add_argument(
            "--strict", action="store_true", help="Prepend 'use strict'; (JavaScript/TypeScript)"
        )
        convert_parser.add_argument(
            "--use-indentation",
            action="store_true",
            help="Let dedented lines close blocks in addition to END keywords",
        )
        annotate = convert_parser.add_argument_group("annotations (javascript target)")
        annotate.add_argument(
            "--show-metacognition", action="store_true", help="Explain the intent of each step"
        )
        annotate.add_argument(
            "--show-actor-pattern", action="store_true", help="Split calls into actor and action"
        )
        annotate.add_argument(
            "--explain-every-line", action="store_true", help="Add syntax and result notes per line"
        )
        convert_parser.add_argument(
            "--json", action="store_true", help="Print the full result as JSON"
        )

        detect_parser = subparsers.add_parser("detect", help="Detect the source language")
        add_input(detect_parser)

        parse_parser = subparsers.add_parser("parse", help="Print the parsed tree as JSON")
        add_input(parse_parser)
        parse_parser.add_argument("-s", "--source", help="Source language (default: auto-detect)")
        parse_parser.add_argument("--use-indentation", action="store_true")

        subparsers.add_parser("languages", help="List source and target languages")

        config_parser = subparsers.add_parser("config", help="Manage configuration files")
        config_sub = config_parser.add_subparsers(dest="config_command")

        validate_parser = config_sub.add_parser("validate", help="Validate a configuration file")
        validate_parser.add_argument("--path", required=True, help="Path to configuration file")
        validate_parser.add_argument(
            "--lenient", action="store_true", help="Report problems as warnings (exit 0)"
        )

        init_parser = config_sub.add_parser("init", help="Write a default configuration file")
        init_parser.add_argument("-o", "--output", default="config.yaml")
        init_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

        config_sub.add_parser("show", help="Show the effective configuration")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        parsed_args = self.parser.parse_args(args)

        logging.basicConfig(
            level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
            format="%(levelname)s: %(message)s",
        )

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        command_map = {
            "convert": self.cmd_convert,
            "detect": self.cmd_detect,
            "parse": self.cmd_parse,
            "languages": self.cmd_languages,
            "config": self.cmd_config,
        }
        try:
            return command_map[parsed_args.command](parsed_args)
        except ConverterError as e:
            print(e.format_error(), file=sys.stderr)
            return 2
        except OSError as e:
            logger.error("Error: %s", e)
            return 1

    def _load_config(self, args) -> Config:
        config = ConfigManager.load(args.config) if args.config else ConfigManager.load()
        # --verbose wins over the configured level
        level = logging.DEBUG if args.verbose else getattr(logging, str(config.log_level).upper(), logging.INFO)
        logging.getLogger(PACKAGE_LOGGER).setLevel(level)
        return config

    def cmd_convert(self, args) -> int:
        config = self._load_config(args)
        generation = config.generation
        options = replace(
            generation.to_options(),
            **{
                key: value
                for key, value in (
                    ("indent_size", args.indent_size),
                    ("indent_char", {"space": " ", "tab": "\t"}.get(args.indent_char)),
                    ("include_comments", False if args.no_comments else None),
                    ("strict_mode", True if args.strict else None),
                )
                if value is not None
            },
        )
        annotations = AnnotationOptions(
            show_metacognition=args.show_metacognition,
            show_actor_pattern=args.show_actor_pattern,
            explain_every_line=args.explain_every_line,
        )
        if annotations.enabled:
            options = replace(options, annotations=annotations)
        parse_options = config.parsing.to_options()
        if args.use_indentation:
            parse_options = replace(parse_options, use_indentation=True)

        result = convert(
            _read_input(args),
            args.target or generation.default_target,
            source=args.source or config.parsing.default_source,
            parse_options=parse_options,
            generate_options=options,
        )

        for warning in result.warnings:
            logger.warning("%s", warning)

        if args.output:
            Path(args.output).write_text(result.code + "\n", encoding="utf-8")
            logger.info("Wrote %s", args.output)
        if args.json:
            _print_json(result.to_dict())
        elif not args.output:
            print(result.code)
        return 0

    def cmd_detect(self, args) -> int:
        language = detect_language(_read_input(args))
        print(language.value)
        return 0

    def cmd_parse(self, args) -> int:
        parsed = parse_with_result(
            _read_input(args),
            args.source or AUTO,
            ParseOptions(use_indentation=args.use_indentation),
        )
        _print_json(
            {
                "source": parsed.source.value,
                "implemented": parsed.implemented,
                "warnings": parsed.warnings,
                "ast": tree_to_dicts(parsed.nodes),
            }
        )
        return 0

    def cmd_languages(self, args) -> int:
        print("Sources:")
        for language in SourceLanguage:
            capability = SOURCE_CAPABILITIES[language]
            status = "implemented" if capability.implemented else "read as natural language"
            print(f"  {language.value:<12} {status}")
        print("Targets:")
        for tag in list_targets():
            print(f"  {tag}")
        return 0

    def cmd_config(self, args) -> int:
        if args.config_command == "validate":
            exit_code, result = validate_config(args.path, lenient=args.lenient)
            _print_json(result)
            return exit_code

        if args.config_command == "init":
            output = Path(args.output)
            if output.exists() and not args.force:
                logger.error("File %s already exists (use --force to overwrite)", output)
                return 1
            ConfigManager.save(Config(), output)
            print(f"Configuration written to {output}")
            return 0

        if args.config_command == "show":
            try:
                config = self._load_config(args)
            except ConfigurationError as e:
                print(e.format_error(), file=sys.stderr)
                return 1
            _print_json(
                {
                    "config_path": str(Path(args.config) if args.config else ConfigManager.default_path()),
                    "lenient": ConfigManager._truthy_env("PSEUDOCONV_LENIENT_CONFIG"),
                    "settings": config.to_dict(),
                    "targets": [lang.value for lang in TargetLanguage],
                    "env_overrides": sorted(k for k in Config._ENV_OVERRIDES if k in os.environ),
                }
            )
            return 0

        logger.error("Specify a config command: validate, init or show")
        return 1


def main():
    """Main entry point"""
    sys.exit(ConverterCLI().run())


if __name__ == "__main__":
    main()
