"""
PassForge CLI
==============

Click-based command-line interface for the PassForge toolkit.  Provides
subcommands for composite strength analysis, the quick check, rotation
recommendations, policy validation, password and passphrase generation,
and Argon2id hashing.

Usage::

    passforge analyze "Tr0ub4dor&3"
    passforge quick "hunter2"
    passforge expiry "Pass123" --created 2024-01-01 --mfa
    passforge policy "correct horse battery" --username alice
    passforge generate --count 5 --length 20
    passforge passphrase --words 6 --separator space
    passforge hash "secret" --memory 65536
    passforge calibrate --target-ms 500

References:
    - Click Documentation. https://click.palletsprojects.com/
"""

from __future__ import annotations

import asyncio
import datetime as _dt
from pathlib import Path
from typing import Any, Optional

import click

from shared.config import ForgeConfig
from shared.console import ForgeConsole
from shared.logger import ForgeLogger
from shared.models import ScanResult

from passforge import __version__
from passforge.core.engine import ForgeEngine
from passforge.core.models import (
    CapitalizeStyle,
    ExpiryEstimate,
    GeneratedPassword,
    HashAlgorithm,
    MemorableLength,
    MinimumRequirementsResult,
    PolicyResult,
    QuickStrengthResult,
    RiskProfile,
    SeparatorStyle,
    StrengthResult,
)
from passforge.output.console import ForgeConsoleOutput
from passforge.output.report import ForgeReportGenerator


def _choices(enum_cls: Any) -> click.Choice:
    return click.Choice([member.value for member in enum_cls])


# ===================================================================== #
#  Async Runner Helper
# ===================================================================== #

def _run_async(coro):
    """Run an engine coroutine from a synchronous click handler."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop and loop.is_running():
        import concurrent.futures
        with concurrent.futures.ThreadPoolExecutor() as pool:
            return pool.submit(asyncio.run, coro).result()
    return asyncio.run(coro)


# ===================================================================== #
#  CLI Group
# ===================================================================== #

@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a PassForge configuration file (TOML).",
)
@click.option(
    "--output", "-o",
    type=click.Choice(["console", "json"]),
    default="console",
    help="Output format.",
)
@click.option(
    "--output-file", "-f",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the JSON report to this file.",
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    default=False,
    help="Suppress banner, log output and informational messages.",
)
@click.version_option(__version__, prog_name="passforge")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[str],
    output: str,
    output_file: Optional[str],
    quiet: bool,
) -> None:
    """PassForge -- password generation, strength, rotation and policy toolkit."""
    ctx.ensure_object(dict)

    forge_config = ForgeConfig.load(config)
    settings = forge_config.global_settings
    ForgeLogger.configure(
        log_level="DEBUG" if settings.debug else settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.log_json,
        console_output=not quiet,
    )

    console = ForgeConsole(quiet=quiet or output == "json")
    ctx.obj["config"] = forge_config
    ctx.obj["output_format"] = output
    ctx.obj["output_file"] = output_file
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = console
    ctx.obj["engine"] = ForgeEngine(forge_config)
    ctx.obj["display"] = ForgeConsoleOutput(console)
    ctx.obj["reporter"] = ForgeReportGenerator(version=__version__)

    if not quiet and output == "console":
        console.banner(version=__version__)


def _handle_output(ctx: click.Context, result: ScanResult, render) -> None:
    """Render *result* on the console or as JSON, then set the exit code.

    Args:
        ctx: Click context containing configuration.
        result: ScanResult to output.
        render: Callable drawing the typed console view from metadata.
    """
    console: ForgeConsole = ctx.obj["console"]
    reporter: ForgeReportGenerator = ctx.obj["reporter"]
    output_file = ctx.obj["output_file"]
    failed = "error" in result.metadata

    if ctx.obj["output_format"] == "json":
        if output_file:
            path = reporter.generate_json(result, Path(output_file))
            click.echo(f"JSON report saved to: {path}", err=True)
        else:
            click.echo(reporter.to_json(result))
    else:
        if failed:
            console.error(result.summary)
        else:
            render(result.metadata)
        console.findings_table(result.findings)
        if output_file:
            path = reporter.generate_json(result, Path(output_file))
            console.success(f"JSON report saved to: {path}")

    if failed:
        ctx.exit(1)


# ===================================================================== #
#  Subcommands
# ===================================================================== #

@cli.command()
@click.argument("password")
@click.pass_context
def analyze(ctx: click.Context, password: str) -> None:
    """Composite strength analysis (zxcvbn score, weaknesses, crack cost)."""
    engine: ForgeEngine = ctx.obj["engine"]
    display: ForgeConsoleOutput = ctx.obj["display"]

    result = _run_async(engine.analyze_password(password))
    _handle_output(ctx, result, lambda raw: display.display_strength(
        StrengthResult.model_validate(raw),
        raw.get("crack_cost_usd"),
        raw.get("hash_algorithm", "argon2id"),
    ))


@cli.command()
@click.argument("password")
@click.pass_context
def quick(ctx: click.Context, password: str) -> None:
    """Fast strength check without the external scorer."""
    engine: ForgeEngine = ctx.obj["engine"]
    display: ForgeConsoleOutput = ctx.obj["display"]

    result = _run_async(engine.quick_check(password))
    _handle_output(ctx, result, lambda raw: display.display_quick(
        QuickStrengthResult.model_validate(raw["quick"]),
        MinimumRequirementsResult.model_validate(raw["minimum"]),
    ))


@cli.command()
@click.argument("password")
@click.option(
    "--created",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]),
    default=None,
    help="When the password was set (UTC). Defaults to now.",
)
@click.option("--risk", type=_choices(RiskProfile), default=None, help="Account risk profile.")
@click.option("--mfa/--no-mfa", default=None, help="Account is protected by MFA.")
@click.option("--privileged/--standard", default=None, help="Privileged account (90-day cap).")
@click.option("--algorithm", type=_choices(HashAlgorithm), default=None, help="Server-side hash.")
@click.option("--breached", is_flag=True, default=False, help="Password is in a breach corpus.")
@click.option(
    "--similar-breach-days",
    type=click.IntRange(min=0),
    default=None,
    help="Days since similar passwords were found breached.",
)
@click.pass_context
def expiry(
    ctx: click.Context,
    password: str,
    created: Optional[_dt.datetime],
    risk: Optional[str],
    mfa: Optional[bool],
    privileged: Optional[bool],
    algorithm: Optional[str],
    breached: bool,
    similar_breach_days: Optional[int],
) -> None:
    """Recommend a rotation schedule for a password."""
    engine: ForgeEngine = ctx.obj["engine"]
    display: ForgeConsoleOutput = ctx.obj["display"]

    options = engine.expiry_options(
        risk_profile=risk,
        has_mfa=mfa,
        is_privileged=privileged,
        hash_algorithm=algorithm,
        is_breached=breached,
        has_similar_breaches=similar_breach_days is not None,
        days_since_breach_found=similar_breach_days,
    )
    created_at = created if created is not None else _dt.datetime.now(_dt.timezone.utc)

    result = _run_async(engine.evaluate_expiry(password, created_at, options))
    _handle_output(ctx, result, lambda raw: display.display_expiry(
        ExpiryEstimate.model_validate(raw),
        raw["schedule"],
        raw["rotate_now"],
    ))


@cli.command()
@click.argument("password")
@click.option("--min-length", type=int, default=None, help="Override the minimum length.")
@click.option("--max-length", type=int, default=None, help="Override the maximum length.")
@click.option("--context-word", "context_words", multiple=True, help="Service word to reject.")
@click.option("--no-patterns", is_flag=True, default=False, help="Skip pattern warnings.")
@click.option("--username", default=None)
@click.option("--email", default=None)
@click.option("--first-name", default=None)
@click.option("--last-name", default=None)
@click.pass_context
def policy(
    ctx: click.Context,
    password: str,
    min_length: Optional[int],
    max_length: Optional[int],
    context_words: tuple[str, ...],
    no_patterns: bool,
    username: Optional[str],
    email: Optional[str],
    first_name: Optional[str],
    last_name: Optional[str],
) -> None:
    """Validate a password against the NIST SP 800-63B-style policy."""
    engine: ForgeEngine = ctx.obj["engine"]
    display: ForgeConsoleOutput = ctx.obj["display"]

    overrides: dict[str, Any] = {}
    if min_length is not None:
        overrides["min_length"] = min_length
    if max_length is not None:
        overrides["max_length"] = max_length
    if context_words:
        overrides["context_words"] = tuple(engine.config.policy.context_words) + context_words
    if no_patterns:
        overrides["detect_patterns"] = False

    context = {
        "username": username,
        "email": email,
        "first_name": first_name,
        "last_name": last_name,
    }

    result = _run_async(engine.validate_policy(password, context, overrides))
    _handle_output(ctx, result, lambda raw: display.display_policy(
        PolicyResult.model_validate({**raw, "normalized": ""}),
    ))


@cli.command()
@click.option("--count", "-n", type=int, default=1, show_default=True)
@click.option("--length", "-l", type=int, default=None, help="Password length (8-128).")
@click.option("--uppercase/--no-uppercase", default=None)
@click.option("--lowercase/--no-lowercase", default=None)
@click.option("--numbers/--no-numbers", default=None)
@click.option("--symbols/--no-symbols", default=None)
@click.option("--exclude-ambiguous/--allow-ambiguous", default=None, help="Drop 0 O l 1 I.")
@click.option("--charset", default=None, help="Custom character set (overrides classes).")
@click.option("--pronounceable", is_flag=True, default=False)
@click.pass_context
def generate(
    ctx: click.Context,
    count: int,
    length: Optional[int],
    uppercase: Optional[bool],
    lowercase: Optional[bool],
    numbers: Optional[bool],
    symbols: Optional[bool],
    exclude_ambiguous: Optional[bool],
    charset: Optional[str],
    pronounceable: bool,
) -> None:
    """Generate random passwords from the OS CSPRNG."""
    engine: ForgeEngine = ctx.obj["engine"]
    display: ForgeConsoleOutput = ctx.obj["display"]

    options = engine.generator_options(
        length=length,
        include_uppercase=uppercase,
        include_lowercase=lowercase,
        include_numbers=numbers,
        include_symbols=symbols,
        exclude_ambiguous=exclude_ambiguous,
        custom_charset=charset,
    )

    result = _run_async(engine.generate(count, options, pronounceable=pronounceable))
    _handle_output(ctx, result, lambda raw: display.display_generated(
        [GeneratedPassword.model_validate(item) for item in raw["passwords"]],
        title="Generated Passwords",
    ))


@cli.command()
@click.option("--count", "-n", type=int, default=1, show_default=True)
@click.option("--words", "-w", type=int, default=None, help="Word count (4-8).")
@click.option("--separator", type=_choices(SeparatorStyle), default=None)
@click.option("--capitalize", type=_choices(CapitalizeStyle), default=None)
@click.option("--numbers/--no-numbers", default=None, help="Insert 2-4 digits.")
@click.option(
    "--memorable",
    type=_choices(MemorableLength),
    default=None,
    help="Capitalized words run together with digits.",
)
@click.pass_context
def passphrase(
    ctx: click.Context,
    count: int,
    words: Optional[int],
    separator: Optional[str],
    capitalize: Optional[str],
    numbers: Optional[bool],
    memorable: Optional[str],
) -> None:
    """Generate diceware-style passphrases."""
    engine: ForgeEngine = ctx.obj["engine"]
    display: ForgeConsoleOutput = ctx.obj["display"]

    options = engine.passphrase_options(
        word_count=words,
        separator=separator,
        capitalize=capitalize,
        include_numbers=numbers,
    )

    result = _run_async(engine.passphrase(count, options, memorable=memorable))
    _handle_output(ctx, result, lambda raw: display.display_generated(
        [GeneratedPassword.model_validate(item) for item in raw["passwords"]],
        title="Generated Passphrases",
    ))


@cli.command("hash")
@click.argument("password")
@click.option("--memory", "memory_kib", type=int, default=None, help="Memory cost in KiB.")
@click.option("--iterations", type=int, default=None, help="Time cost.")
@click.option("--parallelism", type=int, default=None, help="Lanes.")
@click.option("--verify", "encoded", default=None, help="Check against this encoded hash instead.")
@click.pass_context
def hash_command(
    ctx: click.Context,
    password: str,
    memory_kib: Optional[int],
    iterations: Optional[int],
    parallelism: Optional[int],
    encoded: Optional[str],
) -> None:
    """Hash a password with Argon2id, or verify one against a hash."""
    engine: ForgeEngine = ctx.obj["engine"]
    display: ForgeConsoleOutput = ctx.obj["display"]

    options = engine.argon2_options(
        memory_kib=memory_kib,
        iterations=iterations,
        parallelism=parallelism,
    )

    result = _run_async(engine.hash_password(password, options, verify=encoded))
    _handle_output(ctx, result, display.display_hash)
    if encoded is not None and not result.metadata.get("verified", False):
        ctx.exit(1)


@cli.command()
@click.option("--target-ms", type=click.IntRange(min=1), default=None, help="Target latency.")
@click.pass_context
def calibrate(ctx: click.Context, target_ms: Optional[int]) -> None:
    """Benchmark Argon2id and recommend parameters for a target latency."""
    engine: ForgeEngine = ctx.obj["engine"]
    display: ForgeConsoleOutput = ctx.obj["display"]
    console: ForgeConsole = ctx.obj["console"]

    with console.status("Benchmarking Argon2id..."):
        result = _run_async(engine.calibrate(target_ms))
    _handle_output(ctx, result, display.display_calibration)


# ===================================================================== #
#  Entry Point
# ===================================================================== #

def main() -> None:
    """Main entry point for the PassForge CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
