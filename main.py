import logging
import sys
import click
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from core.config import ChangelogDigestConfig, reload_config
from core.exporter import Exporter
from core.scanner import RepositoryScanner
from core.summarizer import DigestSummarizer
from core.types import ExportOptions, OutputFormat
from digest.date_utils import get_date_range
from digest.errors import ConfigurationError, DigestError
from digest.logging_config import setup_default_logging

logger = logging.getLogger(__name__)


@click.group()
@click.option('--verbose', '-v', is_flag=True, help="Enable verbose (DEBUG level) logging")
@click.option('--quiet', '-q', is_flag=True, help="Suppress all logging output")
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help="Path to a YAML configuration file")
@click.version_option("1.0.0", prog_name="changelog-digest")
@click.pass_context
def cli(ctx, verbose, quiet, config_path):
    """changelog-digest - Plain-English changelogs from git history, summarized by an LLM."""
    ctx.ensure_object(dict)

    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_default_logging(verbose=verbose)

    # .env in the working directory may carry the API key and model overrides
    load_dotenv(Path.cwd() / ".env")

    try:
        ctx.obj['config'] = reload_config(config_path)
    except (FileNotFoundError, ConfigurationError) as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    logger.debug(f"CLI initialized (verbose={verbose}, quiet={quiet})")


@cli.command()
@click.option('--since', '-s', default=None,
              help="Start of the window: a git date expression ('7 days ago', '2024-01-01') "
                   "or today, weekly, monthly, custom:YYYY-MM-DD")
@click.option('--until', default=None, help="Optional end of the window (git date expression)")
@click.option('--repo', '-r', default=None, help="Repository path (default: current directory)")
@click.option('--format', '-f', 'output_format', default=None,
              type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
              help="Output format")
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help="Write the digest to this file instead of stdout")
@click.option('--audience', '-a', default=None,
              help="Target audience: general, sales, ops, cx (anything else uses general)")
@click.pass_context
def generate(ctx, since, until, repo, output_format, output, audience):
    """Generate a changelog digest for a repository."""
    config: ChangelogDigestConfig = ctx.obj['config']
    audience = audience or config.digest.audience
    logger.info(f"Starting generate command (since={since}, repo={repo}, audience={audience})")

    try:
        # fail on configuration problems before touching git or the model
        config.validate()

        scanner = RepositoryScanner(config)
        click.echo("🔍 Fetching commits...", err=True)
        commits = scanner.scan(repo_path=repo, since=since, until=until)
        click.echo(f"✅ Found {len(commits)} commits", err=True)

        if not commits:
            click.echo("No commits found in this period.")
            click.echo('Try a longer range: --since "1 month ago"')
            return

        date_range = get_date_range(commits)
        click.echo(f"Period: {date_range}", err=True)

        click.echo("🧠 Summarizing with the LLM...", err=True)
        digest = DigestSummarizer(config).build_digest(commits, audience)
        click.echo("✅ Summary generated", err=True)

        options = ExportOptions(
            format=output_format or config.export.default_format,
            audience=audience,
            title=config.export.title,
        )
        exporter = Exporter(config)

        if output:
            saved = exporter.save_to_file(digest, output, options)
            click.echo(f"✅ Saved to {saved}")
        else:
            click.echo("")
            click.echo(exporter.export(digest, options), nl=False)

        logger.info("Generate command completed successfully")

    except DigestError as e:
        logger.error(f"{type(e).__name__}: {e}")
        click.echo(f"\n❌ Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.error(f"Unexpected error in generate command: {type(e).__name__}: {e}", exc_info=True)
        click.echo(f"\n❌ Unexpected error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def check(ctx):
    """Check the Ollama connection and that the configured model is available."""
    config: ChangelogDigestConfig = ctx.obj['config']
    model = config.ollama.model
    logger.info("Running Ollama connection check")
    click.echo(f"🔍 Checking Ollama setup at {config.ollama.endpoint}...\n")

    try:
        config.validate()
    except ConfigurationError as e:
        click.echo(f"❌ Configuration error:\n{e}", err=True)
        sys.exit(1)

    status = DigestSummarizer(config).test_connection()
    if not status["available"]:
        click.echo(f"❌ Ollama check failed:\n{status['error']}", err=True)
        sys.exit(1)

    click.echo("✅ Successfully connected to Ollama server")
    click.echo("\n📦 Available models:")
    if not status["models"]:
        click.echo("   (No models found)")
    for name in status["models"]:
        marker = "✓" if name.lower().split(":")[0] == model.lower().split(":")[0] else "-"
        click.echo(f"   {marker} {name}")

    if status["model_available"]:
        click.echo("\n✅ All requirements met! You're ready to generate digests.")
        logger.info(f"Ollama check passed: {model} available")
    else:
        click.echo(f"\n⚠️  Warning: {model} model not found")
        click.echo(f"   Run: ollama pull {model}")
        logger.warning(f"{model} model not found")
        sys.exit(1)


@cli.command('init-config')
@click.argument('path', required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option('--force', is_flag=True, help="Overwrite an existing file")
@click.pass_context
def init_config(ctx, path, force):
    """Write the current configuration to PATH (default: ./changelog-digest.yaml)."""
    config: ChangelogDigestConfig = ctx.obj['config']
    path = path or Path("changelog-digest.yaml")

    if path.exists() and not force:
        click.echo(f"❌ {path} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    # secrets from the environment stay out of the file
    config = replace(config, ollama=replace(config.ollama, api_key=None))
    saved = config.save(path)
    click.echo(f"✅ Configuration written to {saved}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
