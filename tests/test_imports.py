"""
Test harness to verify all package modules can be imported without errors.
"""

import importlib
import os
import sys
from pathlib import Path

PACKAGE = "triad_atlas"


def import_module(module_name):
    """Attempt to import a module and return any import error."""
    try:
        importlib.import_module(module_name)
        return None
    except Exception as e:
        return str(e)


def find_modules(root_dir):
    """Find all modules of the package under root_dir."""
    modules = []
    package_dir = os.path.join(root_dir, PACKAGE)
    for root, _, files in os.walk(package_dir):
        # Skip hidden directories (like __pycache__ contents)
        if any(part.startswith((".", "__pycache__")) for part in Path(root).parts):
            continue

        for file in files:
            if file.endswith(".py"):
                rel_path = os.path.relpath(os.path.join(root, file), root_dir)
                module_path = rel_path[:-3].replace(os.sep, ".")
                if module_path.endswith(".__init__"):
                    module_path = module_path[: -len(".__init__")]
                modules.append(module_path)
    return sorted(modules)


def test_all_modules_import():
    root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    modules = find_modules(root_dir)
    assert PACKAGE in modules
    assert f"{PACKAGE}.cli.main" in modules

    errors = {}
    for name in modules:
        error = import_module(name)
        if error:
            errors[name] = error
    assert not errors, errors


def main():
    """Main test function to check all modules for import errors."""
    root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    sys.path.insert(0, root_dir)
    modules = find_modules(root_dir)

    print(f"Found {len(modules)} modules to test...\n")

    errors = {}
    for module_name in modules:
        print(f"Testing import of {module_name}... ", end="")
        error = import_module(module_name)
        if error:
            print("FAILED")
            errors[module_name] = error
        else:
            print("PASSED")

    print("\nTest Results:")
    print("-" * 80)

    if errors:
        print(f"Found {len(errors)} import errors:")
        for module, error in errors.items():
            print(f"\n{module}:")
            print(f"  {error}")
        return 1

    print("All modules imported successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
