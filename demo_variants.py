#!/usr/bin/env python3
"""
Demo: emit every example declaration for each of its versions.

Prints the variants as YAML followed by the analyzer's findings.
"""

import logging

from versioning.analyzer import analyze_variants
from versioning.emitter import emit
from versioning.examples import EXAMPLES
from versioning.options import parse_versioning_arguments
from versioning.serialization import variants_to_yaml


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    for name, (arguments, build) in EXAMPLES.items():
        root = build()
        registry, options = parse_versioning_arguments(arguments)
        variants = emit(root, registry, options)

        print("=" * 80)
        print(f"{name.upper()}  versioning({arguments})")
        print("=" * 80)
        print(variants_to_yaml(variants))

        report = analyze_variants(root, registry, variants)
        for warning in report.warnings:
            print(f"  ! {warning}")


if __name__ == "__main__":
    main()
