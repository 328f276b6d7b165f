# tests/conftest.py
"""
Shared fixtures: run the visitor over inline Rust sources and build small
Anchor projects on disk.
"""

import textwrap

import pytest

from anchorsecscan.loader import RustSourceLoader
from anchorsecscan.scanner import analyze_source


@pytest.fixture(scope="session")
def loader():
    return RustSourceLoader()


@pytest.fixture
def analyze(loader):
    """Analyze a dedented Rust snippet and return the AnalysisResult."""

    def _analyze(source, has_overflow_checks=False, file_path="programs/demo/src/lib.rs"):
        return analyze_source(
            textwrap.dedent(source),
            file_path=file_path,
            has_overflow_checks=has_overflow_checks,
            loader=loader,
        )

    return _analyze


def vulns(result, severity=None, containing=None):
    """Filter vulnerabilities by severity and description substring."""
    out = []
    for v in result.vulnerabilities:
        if severity is not None and v.severity is not severity:
            continue
        if containing is not None and containing not in v.description:
            continue
        out.append(v)
    return out


def texts(items):
    return [i.description for i in items]


@pytest.fixture
def anchor_project(tmp_path):
    """
    A small Anchor workspace:

        Cargo.toml
        programs/vault/src/lib.rs
        programs/vault/src/broken.rs
        target/debug/generated.rs
    """

    def _make(overflow_checks=False, broken=True):
        manifest = "[workspace]\nmembers = [\"programs/*\"]\n"
        if overflow_checks:
            manifest += "\n[profile.release]\noverflow-checks = true\n"
        (tmp_path / "Cargo.toml").write_text(manifest)

        src = tmp_path / "programs" / "vault" / "src"
        src.mkdir(parents=True)
        (src / "lib.rs").write_text(textwrap.dedent("""\
            use anchor_lang::prelude::*;

            #[program]
            pub mod vault {
                use super::*;

                pub fn deposit(ctx: Context<Deposit>, amount: u64) -> Result<()> {
                    let vault = &mut ctx.accounts.vault;
                    vault.total = vault.total + amount;
                    Ok(())
                }
            }

            #[derive(Accounts)]
            pub struct Deposit<'info> {
                #[account(mut)]
                pub vault: Account<'info, Vault>,
                pub token_program: AccountInfo<'info>,
            }
            """))
        if broken:
            (src / "broken.rs").write_text("fn broken( {\n")

        generated = tmp_path / "target" / "debug"
        generated.mkdir(parents=True)
        (generated / "generated.rs").write_text("fn initialize() { let x = 1 + 2; }\n")
        return tmp_path

    return _make
