# tests/test_visitor.py
"""
Tests for function and expression rules of the Anchor visitor.
"""

import pytest

from anchorsecscan.models import Severity
from anchorsecscan.visitor import attribute_path, is_ata_field, is_program_field, parse_int_literal
from tests.conftest import texts, vulns


class TestReinitialization:

    def test_init_without_guard(self, analyze):
        result = analyze("""
            pub fn initialize(ctx: Context<Initialize>, data: u64) -> Result<()> {
                let state = &mut ctx.accounts.state;
                state.data = data;
                Ok(())
            }
        """)
        found = vulns(result, Severity.HIGH, "reinitialization check")
        assert len(found) == 1
        assert "'initialize'" in found[0].description
        assert len(result.vulnerabilities) == 1

    def test_if_guard_suppresses(self, analyze):
        result = analyze("""
            pub fn initialize(ctx: Context<Initialize>, data: u64) -> Result<()> {
                let state = &mut ctx.accounts.state;
                if state.is_initialized {
                    return err!(ErrorCode::AlreadyInitialized);
                }
                state.is_initialized = true;
                state.data = data;
                Ok(())
            }
        """)
        assert vulns(result, containing="reinitialization check") == []
        assert any("Detected reinitialization guard" in t for t in texts(result.info))

    def test_guard_macro_is_independent_of_exit_check(self, analyze):
        # require! counts as a guard signal, but the body has no "if"/"assert"
        result = analyze("""
            pub fn init_config(ctx: Context<InitConfig>) -> Result<()> {
                require!(!ctx.accounts.config.is_initialized, ErrorCode::AlreadyInitialized);
                ctx.accounts.config.is_initialized = true;
                Ok(())
            }
        """)
        assert any("require!" in t for t in texts(result.info))
        assert len(vulns(result, Severity.HIGH, "reinitialization check")) == 1

    def test_assert_macro_guard(self, analyze):
        result = analyze("""
            pub fn create_pool(pool: &mut Pool) {
                assert!(!pool.is_initialized);
                pool.is_initialized = true;
            }
        """)
        assert vulns(result, containing="reinitialization check") == []
        assert any("assert!" in t for t in texts(result.info))

    def test_guard_info_only_in_init_functions(self, analyze):
        result = analyze("""
            pub fn update(state: &mut State) {
                if state.is_initialized {
                    state.counter = 1;
                }
            }
        """)
        assert result.info == []
        assert result.vulnerabilities == []

    def test_impl_methods_are_checked(self, analyze):
        result = analyze("""
            impl Vault {
                pub fn init_vault(&mut self, owner: Pubkey) {
                    self.owner = owner;
                }
            }
        """)
        assert len(vulns(result, Severity.HIGH, "reinitialization check")) == 1

    def test_init_marker_is_case_sensitive(self, analyze):
        result = analyze("""
            pub fn Setup_Init_Data() {}
        """)
        # "Init" is not "init"
        assert result.vulnerabilities == []


class TestArithmetic:

    SOURCE = """
        pub fn deposit(ctx: Context<Deposit>, amount: u64) -> Result<()> {
            let vault = &mut ctx.accounts.vault;
            vault.total = vault.total + amount;
            Ok(())
        }
    """

    def test_overflow_without_checks(self, analyze):
        result = analyze(self.SOURCE, has_overflow_checks=False)
        found = vulns(result, Severity.HIGH, "overflow/underflow")
        assert len(found) == 1
        assert "addition" in found[0].description
        assert not any("runtime overflow protection" in t for t in texts(result.info))

    def test_overflow_checks_downgrade_to_info(self, analyze):
        result = analyze(self.SOURCE, has_overflow_checks=True)
        assert result.vulnerabilities == []
        protected = [t for t in texts(result.info) if "runtime overflow protection" in t]
        assert protected == ["Arithmetic operation with runtime overflow protection: addition operation"]

    def test_one_finding_per_operation(self, analyze):
        result = analyze("""
            fn fee(a: u64, b: u64, c: u64) -> u64 {
                a + b * c - 1
            }
        """)
        ops = sorted(v.description.split(" in ")[1] for v in vulns(result, containing="overflow"))
        assert ops == ["addition operation", "multiplication operation", "subtraction operation"]

    def test_other_operators_ignored(self, analyze):
        result = analyze("""
            fn ratio(a: u64, b: u64) -> bool {
                a / b > 2 && a % b == 0
            }
        """)
        assert result.vulnerabilities == []

    def test_arithmetic_in_const_item(self, analyze):
        result = analyze("""
            const SPACE: usize = 8 + 32;
        """)
        assert len(vulns(result, Severity.HIGH, "overflow")) == 1


class TestLiterals:

    @pytest.mark.parametrize("text,value", [
        ("42", 42),
        ("5_000_000_000", 5000000000),
        ("10u64", 10),
        ("0xFFu8", 255),
        ("0x1_0000_0000", 4294967296),
        ("0o17", 15),
        ("0b1010", 10),
        ("1_000i128", 1000),
    ])
    def test_parse_int_literal(self, text, value):
        assert parse_int_literal(text) == value

    def test_parse_int_literal_rejects_non_numbers(self):
        assert parse_int_literal("abc") is None
        assert parse_int_literal("") is None
        assert parse_int_literal("u64") is None

    def test_large_literal_warning(self, analyze):
        result = analyze("""
            fn supply() -> u64 {
                let max_supply: u64 = 5_000_000_000;
                let small: u64 = 4_294_967_295;
                max_supply
            }
        """)
        assert texts(result.warnings) == ["Large integer literal detected: 5000000000"]

    def test_large_hex_literal(self, analyze):
        result = analyze("""
            const MASK: u64 = 0x1_0000_0000;
        """)
        assert texts(result.warnings) == ["Large integer literal detected: 4294967296"]


class TestRemainingAccounts:

    def test_sibling_functions_do_not_share_state(self, analyze):
        result = analyze("""
            pub fn safe_batch(ctx: Context<Batch>) -> Result<()> {
                let extra = &ctx.remaining_accounts[0];
                if extra.owner == ctx.program_id {
                    msg!("owned");
                }
                Ok(())
            }

            pub fn unsafe_batch(ctx: Context<Batch>) -> Result<()> {
                let extra = &ctx.remaining_accounts[0];
                msg!("{}", extra.key);
                Ok(())
            }
        """)
        found = vulns(result, Severity.HIGH, "remaining accounts")
        assert len(found) == 1
        assert "'unsafe_batch'" in found[0].description

    def test_validation_method_call(self, analyze):
        result = analyze("""
            pub fn method_checked(ctx: Context<Batch>) -> Result<()> {
                let extra = &ctx.remaining_accounts[0];
                extra.verify_owner(&crate::ID)?;
                Ok(())
            }
        """)
        assert vulns(result, containing="remaining accounts") == []

    def test_key_comparison_counts_as_validation(self, analyze):
        result = analyze("""
            pub fn pay(ctx: Context<Pay>) -> Result<()> {
                for acc in ctx.remaining_accounts.iter() {
                    if acc.key == &ctx.accounts.expected.key() {
                        msg!("ok");
                    }
                }
                Ok(())
            }
        """)
        assert vulns(result, containing="remaining accounts") == []

    def test_nested_function_state_does_not_leak(self, analyze):
        result = analyze("""
            pub fn outer(ctx: Context<Outer>) -> Result<()> {
                let extra = &ctx.remaining_accounts[0];
                fn helper(a: &AccountInfo) -> bool {
                    a.owner == &crate::ID
                }
                Ok(())
            }
        """)
        found = vulns(result, Severity.HIGH, "remaining accounts")
        assert len(found) == 1
        assert "'outer'" in found[0].description


class TestCpi:

    def test_invoke_is_arbitrary_cpi(self, analyze):
        result = analyze("""
            pub fn withdraw(ctx: Context<Withdraw>, ix: Instruction) -> Result<()> {
                invoke(&ix, &[ctx.accounts.vault.to_account_info()])?;
                Ok(())
            }
        """)
        found = vulns(result, Severity.CRITICAL)
        assert texts(found) == ["Potential arbitrary CPI vulnerability: call to invoke"]

    def test_invoke_signed_path(self, analyze):
        result = analyze("""
            pub fn sweep(ctx: Context<Sweep>, ix: Instruction, signer: &[&[&[u8]]]) -> Result<()> {
                anchor_lang::solana_program::program::invoke_signed(&ix, &[], signer)?;
                Ok(())
            }
        """)
        assert len(vulns(result, Severity.CRITICAL, "arbitrary CPI")) == 1

    def test_access_after_cpi_without_reload(self, analyze):
        result = analyze("""
            pub fn withdraw(ctx: Context<Withdraw>, ix: Instruction) -> Result<()> {
                invoke(&ix, &[ctx.accounts.vault.to_account_info()])?;
                let remaining = ctx.accounts.vault.lamports;
                Ok(())
            }
        """)
        stale = vulns(result, Severity.CRITICAL, "accessed after CPI without reload")
        assert len(stale) == 1
        assert "ctx.accounts.vault.lamports" in stale[0].description

    def test_reload_before_access(self, analyze):
        result = analyze("""
            pub fn withdraw(ctx: Context<Withdraw>, ix: Instruction) -> Result<()> {
                invoke(&ix, &[ctx.accounts.vault.to_account_info()])?;
                ctx.accounts.vault.reload()?;
                let remaining = ctx.accounts.vault.lamports;
                Ok(())
            }
        """)
        assert vulns(result, containing="after CPI") == []
        assert len(vulns(result, Severity.CRITICAL)) == 1

    def test_cpi_context_warning(self, analyze):
        result = analyze("""
            pub fn stake(ctx: Context<Stake>, amount: u64) -> Result<()> {
                let cpi_ctx = CpiContext::new(
                    ctx.accounts.token_program.to_account_info(),
                    Transfer {
                        from: ctx.accounts.user_tokens.to_account_info(),
                        to: ctx.accounts.vault.to_account_info(),
                        authority: ctx.accounts.user.to_account_info(),
                    },
                );
                token::transfer(cpi_ctx, amount)?;
                Ok(())
            }
        """)
        assert result.vulnerabilities == []
        assert any("Cross-Program Invocation detected" in t for t in texts(result.warnings))

    def test_cpi_context_then_stale_read(self, analyze):
        result = analyze("""
            pub fn stake(ctx: Context<Stake>, amount: u64) -> Result<()> {
                let cpi_ctx = CpiContext::new(ctx.accounts.token_program.to_account_info(), accounts);
                token::transfer(cpi_ctx, amount)?;
                let staked = ctx.accounts.vault.amount;
                Ok(())
            }
        """)
        assert len(vulns(result, Severity.CRITICAL, "after CPI without reload")) == 1


class TestBumpSeeds:

    def test_user_bump_with_create_program_address(self, analyze):
        result = analyze("""
            pub fn derive_vault(ctx: Context<DeriveVault>, bump: u8) -> Result<()> {
                let seeds = &[b"vault".as_ref(), &[bump]];
                let vault = Pubkey::create_program_address(seeds, ctx.program_id).unwrap();
                Ok(())
            }
        """)
        found = vulns(result, Severity.CRITICAL)
        assert texts(found) == ["Possible bump seed canonicalization vulnerability in function 'derive_vault'"]

    def test_no_bump_parameter(self, analyze):
        result = analyze("""
            pub fn derive_vault(ctx: Context<DeriveVault>, seed: u8) -> Result<()> {
                let vault = Pubkey::create_program_address(&[&[seed]], ctx.program_id).unwrap();
                Ok(())
            }
        """)
        assert result.vulnerabilities == []


class TestNamingAndCasts:

    @pytest.mark.parametrize("name,hint", [
        ("validate_user", "ensure proper validation"),
        ("handle_error", "ensure proper error handling"),
        ("check_access", "ensure proper access control"),
    ])
    def test_name_advisories(self, analyze, name, hint):
        result = analyze(f"fn {name}() {{}}\n")
        assert len(result.warnings) == 1
        assert hint in result.warnings[0].description

    def test_cast_to_account_info(self, analyze):
        result = analyze("""
            fn cast(account: Foo) {
                let info = account as AccountInfo;
            }
        """)
        assert any("Casting to unchecked account type" in t for t in texts(result.warnings))

    def test_error_enum_info(self, analyze):
        result = analyze("""
            #[error_code]
            pub enum ErrorCode {
                AlreadyInitialized,
            }

            pub enum Side {
                Bid,
                Ask,
            }
        """)
        assert texts(result.info) == ["Error enum detected - ensure proper error handling: ErrorCode"]


class TestLocations:

    def test_line_of_finding(self, analyze):
        result = analyze("""\
            fn total(a: u64, b: u64) -> u64 {
                let fee = 3;
                a + b
            }
        """)
        [vuln] = result.vulnerabilities
        assert vuln.location.file == "programs/demo/src/lib.rs"
        assert vuln.location.line == 3
        assert vuln.location.column == 5

    def test_repeated_snippet_resolves_to_first_occurrence(self, analyze):
        result = analyze("""\
            fn one(a: u64, b: u64) -> u64 {
                a + b
            }

            fn two(a: u64, b: u64) -> u64 {
                a + b
            }
        """)
        assert [v.location.line for v in result.vulnerabilities] == [2, 2]


class TestHelpers:

    def test_attribute_path(self):
        assert attribute_path("#[account(mut)]") == "account"
        assert attribute_path("#[derive(Accounts)]") == "derive"
        assert attribute_path("#[account]") == "account"
        assert attribute_path("/// CHECK: doc") == ""

    def test_program_field_names(self):
        assert is_program_field("token_program")
        assert is_program_field("tokenProgram")
        assert not is_program_field("authority_check")

    def test_ata_field_names(self):
        assert is_ata_field("user_ata")
        assert is_ata_field("ata")
        assert is_ata_field("vault_token_account")
        assert is_ata_field("vault_ata_account")
        assert is_ata_field("user_ata_2")
        assert not is_ata_field("data")
        assert not is_ata_field("metadata")
