"""Command-line helpers for powert-core."""

import logging
from pathlib import Path

import typer
from tqdm.auto import tqdm

from powert_core.analysis.concatenate import DecayConcatenation
from powert_core.analysis.decay import DecaySeries
from powert_core.analysis.fitting import fit_decays
from powert_core.analysis.workspace import DecayWorkspace
from powert_core.config import load_config
from powert_core.errors import DecayParseError, EmptyInputError
from powert_core.io import (
    format_params_table,
    load_signal_pair,
    natural_sort_key,
    read_decay_file,
    save_params_csv,
    write_decay_file,
)
from powert_core.types.analysis import PARAMETER_NAMES

config_option = typer.Option(
    None,
    "--config",
    "-c",
    exists=True,
    file_okay=True,
    dir_okay=False,
    help="YAML configuration file. Defaults to ./powert.yaml when present.",
)

app = typer.Typer(help="powert-core utilities")
logger = logging.getLogger(__name__)


def _load_decays(files: list[Path]) -> list[tuple[str, DecaySeries]]:
    """Read decay files in natural name order; any bad file aborts the command."""
    ordered = sorted(files, key=lambda f: natural_sort_key(f.stem))
    decays: list[tuple[str, DecaySeries]] = []
    for path in tqdm(ordered, desc="Reading decays", unit="file", leave=False):
        try:
            decays.append((path.stem, read_decay_file(path)))
        except (FileNotFoundError, DecayParseError) as exc:
            typer.echo(f"Failed to load file: {exc}", err=True)
            raise typer.Exit(code=1)
    return decays


@app.callback()
def main() -> None:
    """powert-core utility commands."""
    # Configure basic logging so info-level messages are visible by default.
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    return None


@app.command()
def estimate(
    files: list[Path] = typer.Argument(
        ..., exists=True, file_okay=True, dir_okay=False, help="Decay files (time,signal)."
    ),
    output: Path | None = typer.Option(
        None, "-o", "--output", dir_okay=False, help="Write the parameter table as CSV."
    ),
    equations: bool = typer.Option(
        False, "--equations", help="Print the fitted equation of every decay."
    ),
    config_path: Path | None = config_option,
) -> None:
    """Estimate decay parameters from the late-time tail of each file."""
    workspace = DecayWorkspace.from_config(load_config(config_path).workspace)
    try:
        workspace.load(_load_decays(files))
    except EmptyInputError as exc:
        typer.echo(f"Cannot estimate parameters: {exc}", err=True)
        raise typer.Exit(code=1)

    rows = [(entry.name, entry.params) for entry in workspace]
    typer.echo(format_params_table(rows))
    if equations:
        for name, params in rows:
            typer.echo(f"{name}: {params}")
    if output is not None:
        save_params_csv(rows, output)
        typer.echo(f"Saved {len(rows)} row(s) to {output}")


@app.command()
def fit(
    files: list[Path] = typer.Argument(
        ..., exists=True, file_okay=True, dir_okay=False, help="Decay files (time,signal)."
    ),
    fix: list[str] = typer.Option(
        [], "--fix", help="Parameter kept at its estimated value (repeatable)."
    ),
    output: Path | None = typer.Option(
        None, "-o", "--output", dir_okay=False, help="Write the refined parameters as CSV."
    ),
) -> None:
    """Estimate and then refine parameters by least squares."""
    unknown = [name for name in fix if name not in PARAMETER_NAMES]
    if unknown:
        typer.echo(
            f"Unknown parameter(s): {', '.join(unknown)}. "
            f"Choose from: {', '.join(PARAMETER_NAMES)}",
            err=True,
        )
        raise typer.Exit(code=1)

    decays = _load_decays(files)

    def progress_callback(current: int, total: int, message: str) -> None:
        logger.info("%s: %d/%d", message, current + 1, total)

    try:
        results = fit_decays(decays, progress_callback=progress_callback, fixed=fix)
    except EmptyInputError as exc:
        typer.echo(f"Cannot fit: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_params_table((name, result.params) for name, result in results))
    for name, result in results:
        status = "ok" if result.success else "failed"
        typer.echo(f"{name}: {status}, R² = {result.r_squared:.4f}")
    if output is not None:
        save_params_csv(((name, result.params) for name, result in results), output)
        typer.echo(f"Saved {len(results)} row(s) to {output}")


@app.command()
def evaluate(
    file: Path = typer.Argument(
        ..., exists=True, file_okay=True, dir_okay=False, help="Decay file (time,signal)."
    ),
    output: Path = typer.Option(
        ..., "-o", "--output", dir_okay=False, help="Where to write the fitted curve."
    ),
    a0: float | None = typer.Option(None, "--a0", help="Override A0."),
    a: float | None = typer.Option(None, "--a", help="Override a."),
    alpha: float | None = typer.Option(None, "--alpha", help="Override alpha."),
    at: float | None = typer.Option(None, "--at", help="Override AT."),
    tau_t: float | None = typer.Option(None, "--tau-t", help="Override tauT."),
    config_path: Path | None = config_option,
) -> None:
    """Write the model curve sampled at the times of a decay file."""
    workspace = DecayWorkspace.from_config(load_config(config_path).workspace)
    try:
        workspace.load(_load_decays([file]))
    except EmptyInputError as exc:
        typer.echo(f"Cannot estimate parameters: {exc}", err=True)
        raise typer.Exit(code=1)

    overrides = {
        name: value
        for name, value in zip(PARAMETER_NAMES, (a0, a, alpha, at, tau_t))
        if value is not None
    }
    if overrides:
        workspace.set_params(0, workspace[0].params.replace(**overrides))

    typer.echo(str(workspace[0].params))
    write_decay_file(output, workspace.fitted(0))
    typer.echo(f"Saved fitted curve to {output}")


@app.command()
def concatenate(
    folders: list[Path] = typer.Argument(
        ...,
        exists=True,
        file_okay=False,
        dir_okay=True,
        help="Measurement folders holding a-b and b signal files.",
    ),
    output: Path = typer.Option(
        ..., "-o", "--output", dir_okay=False, help="Where to write the joined decay."
    ),
    config_path: Path | None = config_option,
) -> None:
    """Join decays measured over different time ranges into one file."""
    config = load_config(config_path)
    concatenation = DecayConcatenation()
    for folder in sorted(folders, key=lambda f: natural_sort_key(f.name)):
        try:
            pair = load_signal_pair(folder, config.decay_loading)
        except (FileNotFoundError, DecayParseError) as exc:
            typer.echo(f"Failed to load the decay data:\n{exc}", err=True)
            raise typer.Exit(code=1)
        if concatenation.has_time_end(pair.decay.time_max):
            typer.echo(
                f"Warning: {pair.name} has the same end time as an earlier decay.",
                err=True,
            )
        concatenation.add(pair.name, pair.decay)

    if not concatenation.is_ordered:
        logger.info("Ordering decays by end time before saving")
        concatenation.sort_by_time_end()

    for entry in concatenation:
        typer.echo(
            f"{entry.name}: use {entry.use_from:g} to {entry.use_to:g} (x{entry.scaling:g})"
        )
    joined = concatenation.concatenate()
    write_decay_file(output, joined)
    typer.echo(f"The decays have been saved to the file:\n{output}")
