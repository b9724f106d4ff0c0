"""
Importing packages named on the command line.

Rules, per argument:
    no arguments at all    -> the current directory
    ends with "/..."       -> TreeWalker.import_tree on the part before it,
                              a directory or else an import path under the roots
    starts with ./ or ../  -> that directory, made absolute
    anything else          -> Importer.import_package

The same context is passed to every import.
"""

import os
import shlex
from typing import List, NamedTuple, Optional

from goresolve.context import BuildContext
from goresolve.exceptions import ArgumentError, GoResolveError
from goresolve.imports import Importer, TreeWalker, get_importer
from goresolve.packages import Packages, flatten

TREE_WILDCARD = "..."


class ArgumentImport(NamedTuple):
    """What one command line argument imported."""

    arg: str
    packages: Packages
    error: Optional[Exception]


def split_quoted_fields(value: str) -> List[str]:
    """
    Split a -tags style value into fields, honoring single and double quotes.

    Raises:
        ArgumentError: On an unterminated quote.
    """
    try:
        return shlex.split(value)
    except ValueError as e:
        raise ArgumentError(f"invalid quoted fields {value!r}: {e}") from e


def _normalize(arg: str) -> str:
    if arg.startswith(("./", "../")) or arg == "..":
        return os.path.abspath(arg)
    return arg


def _tree_root(importer: Importer, directory: str) -> str:
    """Directory to walk for "<directory>/...": a real directory, else an import path."""
    if os.path.isabs(directory) or os.path.isdir(directory):
        return directory
    root, import_path = importer.search_path.to_import(directory)
    return os.path.join(root, *import_path.split("/"))


def import_args(
    args: List[str],
    context: Optional[BuildContext] = None,
    notree: bool = False,
    importer: Optional[Importer] = None,
) -> List[ArgumentImport]:
    """
    Import every argument, collecting failures instead of stopping.

    Args:
        args: Command line arguments naming packages.
        context: Build context for every import.
        notree: Reject "..." arguments.
        importer: Importer to use; defaults to the process-wide one.

    Returns:
        One ArgumentImport per argument (one for the current directory when
        args is empty). A tree argument may carry both packages and an error.
    """
    importer = importer or get_importer()
    if not args:
        args = [""]

    results = []
    for arg in args:
        if os.path.basename(arg) == TREE_WILDCARD:
            if notree:
                results.append(ArgumentImport(arg, Packages(), ArgumentError("cannot use ... imports")))
                continue
            try:
                tree_root = _tree_root(importer, os.path.dirname(arg) or ".")
            except GoResolveError as e:
                results.append(ArgumentImport(arg, Packages(), e))
                continue
            walk = TreeWalker(importer).import_tree(tree_root, context)
            results.append(ArgumentImport(arg, walk.packages, walk.error))
            continue
        try:
            pkg = importer.import_package(_normalize(arg), context)
        except GoResolveError as e:
            results.append(ArgumentImport(arg, Packages(), e))
        else:
            results.append(ArgumentImport(arg, Packages([pkg]), None))
    return results


def first_error(results: List[ArgumentImport]) -> Optional[Exception]:
    """The first error of any argument, or None."""
    for result in results:
        if result.error is not None:
            return result.error
    return None


def flatten_results(results: List[ArgumentImport]) -> Packages:
    """The unique packages imported by all arguments, in order."""
    return flatten(r.packages for r in results)


def import_one(
    args: List[str],
    context: Optional[BuildContext] = None,
    notree: bool = False,
    importer: Optional[Importer] = None,
) -> Packages:
    """
    Import a single argument (or the current directory).

    Raises:
        ArgumentError: More than one argument was given.
        GoResolveError: The import failed.
    """
    if len(args) > 1:
        raise ArgumentError("only one package may be specified")
    results = import_args(args, context, notree, importer)
    error = first_error(results)
    if error is not None:
        raise error
    return results[0].packages
