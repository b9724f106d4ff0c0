from typing import List, Optional

import typer

from goresolve.context import BuildContext, context, default_context
from goresolve.exceptions import ArgumentError, ConfigError, GoResolveError, PartialWalkError
from goresolve.imports import get_importer, import_deps
from goresolve.logging_config import logger, setup_logging
from goresolve.packages import Packages, flatten
from goresolve.schemas import ImportFailure
from goresolve.syntax import DocMode
from goresolve.cli.args import ArgumentImport, flatten_results, import_args, import_one, split_quoted_fields
from goresolve.cli.config import CLIConfig
from goresolve.cli.output import get_console, print_error, print_json, print_lines, print_packages

app = typer.Typer(help="Find Go packages under $GOROOT/$GOPATH and resolve their dependencies.")
console = get_console()

TAGS_HELP = "A list of build tags, as for the go tool's -tags flag."
PACKAGES_HELP = "Directories, import paths, or dir/... trees. Defaults to the current directory."


@app.callback()
def global_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
    machine: bool = typer.Option(
        False,
        "--machine",
        "-m",
        help="Machine mode: compact JSON output (also via GORESOLVE_MACHINE_MODE env var)",
    ),
):
    """
    goresolve: Go package discovery and dependency resolution.
    """
    if verbose:
        setup_logging(level="DEBUG", suppress_console=False, force=True)
    if machine:
        CLIConfig.set_machine_mode(True)


def _context(tags: Optional[str]) -> BuildContext:
    try:
        if not tags:
            return default_context()
        return context(*split_quoted_fields(tags))
    except ArgumentError as e:
        raise typer.BadParameter(str(e), param_hint="--tags")
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


def _failure(target: str, error: Exception) -> ImportFailure:
    return ImportFailure(
        target=target,
        error=str(error),
        error_type=type(error).__name__,
        directory=error.directory if isinstance(error, PartialWalkError) else None,
    )


def _failures(results: List[ArgumentImport]) -> List[ImportFailure]:
    return [_failure(r.arg or ".", r.error) for r in results if r.error is not None]


@app.command("list")
def list_packages(
    packages: Optional[List[str]] = typer.Argument(None, help=PACKAGES_HELP),
    tags: Optional[str] = typer.Option(None, "--tags", help=TAGS_HELP),
    deps: bool = typer.Option(False, "--deps", "-r", help="Also list all dependencies of the packages."),
    no_stdlib: bool = typer.Option(False, "--no-stdlib", help="Leave out standard library packages."),
    no_tree: bool = typer.Option(False, "--no-tree", help="Reject dir/... arguments."),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    List packages named by the arguments, optionally with their dependencies.
    """
    ctx = _context(tags)
    results = import_args(packages or [], ctx, notree=no_tree)
    pkgs = flatten_results(results)
    failures = _failures(results)

    if deps:
        closures: List[Packages] = [pkgs]
        for pkg in pkgs:
            try:
                closures.append(import_deps(pkg))
            except GoResolveError as e:
                failures.append(_failure(pkg.import_path, e))
        pkgs = flatten(closures)

    if no_stdlib:
        pkgs = pkgs.no_stdlib()

    logger.debug(f"list: {len(pkgs)} packages, {len(failures)} failures")
    print_packages("Packages", (p.summary() for p in pkgs), json_output, failures)
    if failures:
        raise typer.Exit(code=1)


@app.command("deps")
def deps(
    package: Optional[str] = typer.Argument(None, help="Directory or import path. Defaults to the current directory."),
    tags: Optional[str] = typer.Option(None, "--tags", help=TAGS_HELP),
    no_stdlib: bool = typer.Option(False, "--no-stdlib", help="Leave out standard library packages."),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Show a package and every package it depends on, directly or indirectly.
    """
    ctx = _context(tags)
    try:
        root = import_one([package] if package else [], ctx, notree=True)[0]
        closure = import_deps(root)
    except GoResolveError as e:
        print_error(str(e), package)
        raise typer.Exit(code=1)

    if no_stdlib:
        closure = closure.no_stdlib()
    print_packages(f"Dependencies of {root.import_path}", (p.summary() for p in closure), json_output)


@app.command("imports")
def imports(
    packages: Optional[List[str]] = typer.Argument(None, help=PACKAGES_HELP),
    tags: Optional[str] = typer.Option(None, "--tags", help=TAGS_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Show every import path referenced by the packages.
    """
    ctx = _context(tags)
    results = import_args(packages or [], ctx)
    paths = sorted(flatten_results(results).import_paths())
    print_lines("Imports", paths, json_output, key="imports")
    failures = _failures(results)
    for failure in failures:
        print_error(failure.error, failure.target)
    if failures:
        raise typer.Exit(code=1)


@app.command("roots")
def roots(
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Show the source roots, in search order.
    """
    _context(None)
    print_lines("Source roots", get_importer().search_path.roots, json_output, key="roots")


@app.command("tags")
def tags_cmd(
    packages: Optional[List[str]] = typer.Argument(None, help=PACKAGES_HELP),
    match: str = typer.Option(..., "--match", help="Build tags the files must be constrained to."),
    tags: Optional[str] = typer.Option(None, "--tags", help=TAGS_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Show the files whose build constraints match the given tags.
    """
    try:
        wanted = split_quoted_fields(match)
    except ArgumentError as e:
        raise typer.BadParameter(str(e), param_hint="--match")
    ctx = _context(tags)
    results = import_args(packages or [], ctx)
    files = []
    try:
        for pkg in flatten_results(results).has_files_matching(*wanted):
            files.extend(f"{pkg.import_path}/{name}" for name in pkg.files_matching(*wanted))
    except GoResolveError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    print_lines(f"Files matching {' '.join(wanted)}", files, json_output, key="files")
    failures = _failures(results)
    for failure in failures:
        print_error(failure.error, failure.target)
    if failures:
        raise typer.Exit(code=1)


@app.command("doc")
def doc(
    package: Optional[str] = typer.Argument(None, help="Directory or import path. Defaults to the current directory."),
    all_decls: bool = typer.Option(False, "--all", "-a", help="Include unexported declarations."),
    tags: Optional[str] = typer.Option(None, "--tags", help=TAGS_HELP),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON."),
):
    """
    Show the package comment and declarations of a package.
    """
    ctx = _context(tags)
    mode = DocMode.ALL_DECLS if all_decls else DocMode.EXPORTED
    try:
        pkg = import_one([package] if package else [], ctx, notree=True)[0]
        pkg_doc = pkg.parse_docs(mode)
    except GoResolveError as e:
        print_error(str(e), package)
        raise typer.Exit(code=1)

    decls = pkg_doc.consts + pkg_doc.vars + pkg_doc.types + pkg_doc.funcs
    if json_output or CLIConfig.is_machine_mode():
        print_json({
            "import_path": pkg_doc.import_path,
            "name": pkg_doc.name,
            "doc": pkg_doc.doc,
            "decls": [
                {"name": d.name, "kind": d.kind, "receiver": d.receiver, "file": d.filename, "line": d.line, "doc": d.doc}
                for d in decls
            ],
        })
        return

    console.print(f'[bold]package {pkg_doc.name}[/bold] // import "{pkg_doc.import_path}"', highlight=False)
    if pkg_doc.doc:
        typer.echo("")
        typer.echo(pkg_doc.doc)
    typer.echo("")
    for d in decls:
        name = f"({d.receiver}) {d.name}" if d.receiver else d.name
        console.print(f"[cyan]{d.kind}[/cyan] {name}  [dim]{d.filename}:{d.line}[/dim]", highlight=False)


if __name__ == "__main__":
    app()
