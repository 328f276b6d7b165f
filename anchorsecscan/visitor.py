"""
Anchor program visitor.

Walks the tree-sitter syntax tree of one Rust file and reports security
findings for Solana/Anchor programs into a shared AnalysisResult:

- Initialization functions without reinitialization checks
- Unvalidated use of remaining accounts
- Arithmetic overflow/underflow and large integer literals
- Unchecked AccountInfo / UncheckedAccount references
- Arbitrary CPI and account data read after a CPI without reload
- PDA bump seed canonicalization issues
- Associated token accounts created with `init` instead of `init_if_needed`

Detection is heuristic: sub-trees are rendered back to source text and
matched against known markers. No dataflow or control-flow graph is built,
so false positives and false negatives are expected.

Usage:
    result = AnalysisResult()
    visitor = AnchorVisitor(result, "programs/vault/src/lib.rs", source, has_overflow_checks=False)
    visitor.visit(tree)
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from tree_sitter import Node, Tree

from .locator import SourceLocator
from .models import AnalysisResult, Info, Location, Severity, Vulnerability, Warning

# === Constants ===
INIT_NAME_MARKERS = ("initialize", "init", "create")
VALIDATION_METHOD_MARKERS = ("check", "verify", "validate", "assert")
OWNERSHIP_FIELDS = {"owner", "key"}
ACCOUNT_CONSTRAINT_MARKERS = ("account", "signer", "constraint", "owner")
UNCHECKED_ACCOUNT_TYPES = ("AccountInfo", "UncheckedAccount")
GUARD_CALL_MARKERS = ("assert", "require")

CPI_INVOKE_MARKER = "invoke"
CPI_CONTEXT_MARKER = "CpiContext"
RELOAD_METHOD = "reload"
REMAINING_ACCOUNTS = "remaining_accounts"
IS_INITIALIZED = "is_initialized"
CREATE_PROGRAM_ADDRESS = "create_program_address"

ARITHMETIC_OPERATIONS = {
    "+": "addition",
    "-": "subtraction",
    "*": "multiplication",
}

U32_MAX = 0xFFFF_FFFF
NON_CANONICAL_BUMPS = {0, 1, 2}

# Account<'info, T> but not UncheckedAccount<'info> or InterfaceAccount<...>
TYPED_ACCOUNT_RE = re.compile(r"(?<![A-Za-z0-9_])Account\s*<")
ATTRIBUTE_PATH_RE = re.compile(r"#\s*\[\s*([A-Za-z_][\w:]*)")
SEEDS_RE = re.compile(r"\bseeds\s*=")
BUMP_RE = re.compile(r"\bbump\b")
BUMP_ASSIGN_RE = re.compile(r"\bbump\s*=(?!=)\s*([^,\)\]]+)")
BUMP_LITERAL_RE = re.compile(r"^(\d+)(?:u8)?$")
INT_LITERAL_RE = re.compile(r"^(0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*)")

# Nodes never descended into: macro bodies are token trees, not expressions
OPAQUE_NODE_TYPES = {
    "attribute_item",
    "inner_attribute_item",
    "line_comment",
    "block_comment",
    "token_tree",
    "macro_definition",
}


@dataclass
class FunctionState:
    """Transient facts collected while walking one function body."""
    is_init_like: bool = False
    remaining_accounts_accessed: bool = False
    remaining_accounts_validated: bool = False
    cpi_performed: bool = False
    accessed_after_cpi: Set[str] = field(default_factory=set)
    reloaded: Set[str] = field(default_factory=set)
    has_bump_parameter: bool = False
    non_canonical_bump_suspected: bool = False


# === Helpers ===
def parse_int_literal(text: str) -> Optional[int]:
    """
    Parse a Rust integer literal.

    Handles decimal, hex, octal and binary forms, `_` separators and type
    suffixes such as `u64`.

    Args:
        text: Literal as written in the source

    Returns:
        Integer value, or None if the text is not an integer literal
    """
    match = INT_LITERAL_RE.match(text.strip())
    if not match:
        return None
    digits = match.group(1).replace("_", "")
    base = 10
    prefix = digits[:2]
    if prefix in ("0x", "0o", "0b"):
        base = {"0x": 16, "0o": 8, "0b": 2}[prefix]
        digits = digits[2:]
    if not digits:
        return None
    return int(digits, base)


def attribute_path(attr_text: str) -> str:
    """Return the path of an attribute, e.g. `account` for `#[account(mut)]`."""
    match = ATTRIBUTE_PATH_RE.match(attr_text.strip())
    return match.group(1) if match else ""


def is_program_field(field_name: str) -> bool:
    """Whether a field name suggests a program reference."""
    return (
        "program" in field_name
        or "Program" in field_name
        or field_name.endswith("_program")
        or field_name.endswith("_Program")
    )


def is_ata_field(field_name: str) -> bool:
    """Whether a field name suggests an associated token account."""
    return (
        field_name == "ata"
        or field_name.startswith("ata_")
        or field_name.endswith("_ata")
        or "_ata_" in field_name
        or "token_account" in field_name
        or "tokenAccount" in field_name
        or "associated" in field_name
    )


def _access_key(text: str) -> str:
    return "".join(text.split())


def _related(key: str, other: str) -> bool:
    return key == other or key.startswith(other + ".") or other.startswith(key + ".")


# === Visitor ===
class AnchorVisitor:
    """
    Visitor that traverses one Rust file to detect vulnerabilities.

    One instance is created per file. Findings are appended to the shared
    result; per-function facts live in a FunctionState that is created when
    a function is entered and dropped when it is left.
    """

    def __init__(
        self,
        result: AnalysisResult,
        current_file: str,
        source: str,
        has_overflow_checks: bool = False,
    ):
        """
        Initialize the visitor.

        Args:
            result: The analysis result where findings will be stored
            current_file: Path of the file being analyzed
            source: Full text of the file
            has_overflow_checks: Whether overflow-checks are enabled in Cargo.toml
        """
        self.result = result
        self.current_file = str(current_file)
        self.source = source
        self.has_overflow_checks = has_overflow_checks
        self.locator = SourceLocator(source)
        self._source_bytes = source.encode("utf8")
        self._current_node: Optional[Node] = None
        # scratch state for expressions outside any function; never reported
        self._state = FunctionState()

    # === Traversal ===
    def visit(self, tree: Tree) -> None:
        """Visit every item of a parsed file."""
        self._visit_children(tree.root_node)

    def _visit_children(self, node: Node) -> None:
        for child in node.named_children:
            self._visit_node(child)

    def _visit_node(self, node: Node) -> None:
        kind = node.type
        if kind in OPAQUE_NODE_TYPES:
            return

        self._update_location(node)
        if kind == "function_item":
            self.check_function(node)
        elif kind == "struct_item":
            self.check_struct(node)
        elif kind == "enum_item":
            self.check_enum(node)
        else:
            marks_cpi = self.check_expression(node)
            self._visit_children(node)
            if marks_cpi:
                # accounts handed to the CPI itself are not "after" it
                self._state.cpi_performed = True

    # === Result Collection ===
    def _text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return self._source_bytes[node.start_byte:node.end_byte].decode("utf8", errors="ignore")

    def _field_text(self, node: Node, name: str) -> str:
        return self._text(node.child_by_field_name(name))

    def _update_location(self, node: Node) -> None:
        self._current_node = node

    def _location(self) -> Location:
        line, column = self.locator.locate(self._text(self._current_node))
        return Location(file=self.current_file, line=line, column=column)

    def add_vulnerability(self, severity: Severity, description: str, suggestion: str) -> None:
        """
        Add a vulnerability at the current location.

        Args:
            severity: The severity level of the vulnerability
            description: Description of the vulnerability
            suggestion: Suggested fix for the vulnerability
        """
        self.result.add_vulnerability(Vulnerability(
            severity=severity,
            description=description,
            location=self._location(),
            suggestion=suggestion,
        ))

    def add_warning(self, description: str, suggestion: str) -> None:
        """Add a warning at the current location."""
        self.result.add_warning(Warning(
            description=description,
            location=self._location(),
            suggestion=suggestion,
        ))

    def add_info(self, description: str) -> None:
        """Add an informational item at the current location."""
        self.result.add_info(Info(description=description, location=self._location()))

    # === Function Analysis ===
    def check_function(self, node: Node) -> None:
        """
        Analyze a function.

        Checks for:
        - Initialization functions without reinitialization checks
        - Naming hints (validate / error / access)
        - Unvalidated remaining accounts
        - Account data read after a CPI without reload
        - User supplied bumps fed to create_program_address

        Args:
            node: function_item node
        """
        fn_name = self._field_text(node, "name")
        outer_state = self._state
        state = FunctionState(is_init_like=any(m in fn_name for m in INIT_NAME_MARKERS))
        state.has_bump_parameter = any("bump" in p for p in self._parameter_names(node))
        self._state = state

        self.check_function_naming_conventions(fn_name)

        body = node.child_by_field_name("body")
        if body is not None:
            self._visit_node(body)

        self._update_location(node)
        self._check_function_exit(fn_name, state, body)

        self._state = outer_state

    def _parameter_names(self, node: Node) -> List[str]:
        params = node.child_by_field_name("parameters")
        if params is None:
            return []
        names = []
        for param in params.named_children:
            if param.type == "parameter":
                names.append(self._field_text(param, "pattern"))
        return names

    def check_function_naming_conventions(self, fn_name: str) -> None:
        """
        Add advisories based on the function name.

        Args:
            fn_name: Name of the function to check
        """
        if "validate" in fn_name:
            self.add_warning(
                f"Function '{fn_name}' contains 'validate' in name - ensure proper validation",
                "Consider using Anchor's built-in validation attributes",
            )

        if "error" in fn_name:
            self.add_warning(
                f"Function '{fn_name}' contains 'error' in name - ensure proper error handling",
                "Use Anchor's error handling macros and proper error types",
            )

        if "access" in fn_name:
            self.add_warning(
                f"Function '{fn_name}' contains 'access' in name - ensure proper access control",
                "Implement proper access control checks using Anchor's constraints",
            )

    def _check_function_exit(self, fn_name: str, state: FunctionState, body: Optional[Node]) -> None:
        if state.remaining_accounts_accessed and not state.remaining_accounts_validated:
            self.add_vulnerability(
                Severity.HIGH,
                f"Accessing remaining accounts without proper validation in function '{fn_name}'",
                "Always validate remaining accounts before using them. "
                "Check account ownership, type, and other constraints.",
            )

        if state.is_init_like:
            self.check_for_init_checks(fn_name, body)

        if state.cpi_performed and state.accessed_after_cpi:
            accessed = ", ".join(sorted(state.accessed_after_cpi)[:3])
            self.add_vulnerability(
                Severity.CRITICAL,
                f"Account data accessed after CPI without reload in function '{fn_name}' ({accessed})",
                "Call reload() on every account modified by the CPI before reading its data again; "
                "Anchor does not refresh deserialized accounts after a cross-program invocation.",
            )

        if state.non_canonical_bump_suspected and state.has_bump_parameter:
            self.add_vulnerability(
                Severity.CRITICAL,
                f"Possible bump seed canonicalization vulnerability in function '{fn_name}'",
                "Derive the PDA with find_program_address and use the canonical bump, "
                "or compare the supplied bump against the stored canonical bump before use.",
            )

    def check_for_init_checks(self, fn_name: str, body: Optional[Node]) -> None:
        """
        Check that an initialization function guards against reinitialization.

        Args:
            fn_name: Name of the function
            body: Function body node
        """
        fn_body = self._text(body)
        has_init_check = IS_INITIALIZED in fn_body and ("if" in fn_body or "assert" in fn_body)

        if not has_init_check:
            self.add_vulnerability(
                Severity.HIGH,
                f"Initialization function without reinitialization check: '{fn_name}'",
                "Add an is_initialized check to prevent reinitialization attacks. "
                "In native Rust, verify an is_initialized flag before setting data. "
                "In Anchor, use the init constraint.",
            )

    # === Expression Analysis ===
    def check_expression(self, node: Node) -> bool:
        """
        Check an expression node for issues.

        Args:
            node: Any node inside a function body or item

        Returns:
            True if the node is a cross-program invocation; the caller marks
            the CPI as performed once the node's children have been visited
        """
        kind = node.type
        if kind == "field_expression":
            self._check_field_access(node)
        elif kind == "binary_expression":
            self._check_binary_expression(node)
        elif kind == "call_expression":
            return self._check_call(node)
        elif kind == "macro_invocation":
            self._check_guard_macro(node)
        elif kind == "if_expression":
            self._check_if_guard(node)
        elif kind == "type_cast_expression":
            self._check_cast(node)
        elif kind == "integer_literal":
            self.check_large_integer_literal(node)
        return False

    def _check_field_access(self, node: Node) -> None:
        state = self._state
        member = self._field_text(node, "field")
        if member == REMAINING_ACCOUNTS:
            state.remaining_accounts_accessed = True

        if state.cpi_performed and member != RELOAD_METHOD:
            key = _access_key(self._text(node))
            if not any(_related(key, r) for r in state.reloaded):
                state.accessed_after_cpi.add(key)

    def _check_binary_expression(self, node: Node) -> None:
        operator = node.child_by_field_name("operator")
        op = operator.type if operator is not None else ""

        if op == "==":
            left = node.child_by_field_name("left")
            if left is not None and left.type == "field_expression":
                if self._field_text(left, "field") in OWNERSHIP_FIELDS:
                    # ownership/key comparison counts as validation anywhere in the function
                    self._state.remaining_accounts_validated = True

        if op in ARITHMETIC_OPERATIONS:
            self.check_arithmetic_operation(op)

    def _callee_parts(self, func: Optional[Node]) -> Tuple[str, str, Optional[Node]]:
        """
        Split a call's function node.

        Returns:
            (callee text, final name, receiver node for method calls)
        """
        if func is None:
            return "", "", None
        if func.type == "generic_function":
            return self._callee_parts(func.child_by_field_name("function"))
        if func.type == "field_expression":
            name = self._field_text(func, "field")
            return name, name, func.child_by_field_name("value")
        if func.type == "scoped_identifier":
            return self._text(func), self._field_text(func, "name"), None
        text = self._text(func)
        return text, text.split("::")[-1].strip(), None

    def _check_call(self, node: Node) -> bool:
        state = self._state
        callee, name, receiver = self._callee_parts(node.child_by_field_name("function"))

        if receiver is not None:
            if any(m in name for m in VALIDATION_METHOD_MARKERS):
                state.remaining_accounts_validated = True
            if name == RELOAD_METHOD:
                state.reloaded.add(_access_key(self._text(receiver)))

        if name == CREATE_PROGRAM_ADDRESS and state.has_bump_parameter:
            state.non_canonical_bump_suspected = True

        if state.is_init_like and any(m in callee for m in GUARD_CALL_MARKERS):
            if IS_INITIALIZED in self._field_text(node, "arguments"):
                self.add_info("Detected reinitialization guard: is_initialized assertion")

        marks_cpi = False
        if CPI_INVOKE_MARKER in callee:
            self.add_vulnerability(
                Severity.CRITICAL,
                f"Potential arbitrary CPI vulnerability: call to {callee}",
                "Verify the program id of the invoked program before the CPI "
                "(compare against a known id or use Program<'info, T>) and validate every account passed to it.",
            )
            marks_cpi = True

        if CPI_CONTEXT_MARKER in callee:
            self.add_warning(
                "Cross-Program Invocation detected - ensure proper program validation",
                "Pass the target program as Program<'info, T> so Anchor checks its id, "
                "and validate all accounts handed to the CPI.",
            )
            marks_cpi = True

        return marks_cpi

    def _check_guard_macro(self, node: Node) -> None:
        if not self._state.is_init_like:
            return
        macro = self._field_text(node, "macro")
        if not any(m in macro for m in GUARD_CALL_MARKERS):
            return
        args = " ".join(self._text(c) for c in node.named_children if c.type == "token_tree")
        if IS_INITIALIZED in args:
            self.add_info(f"Detected reinitialization guard: is_initialized checked by {macro}!")

    def _check_if_guard(self, node: Node) -> None:
        if not self._state.is_init_like:
            return
        condition = self._field_text(node, "condition")
        if IS_INITIALIZED in condition:
            self.add_info("Detected reinitialization guard: is_initialized condition")

    def _check_cast(self, node: Node) -> None:
        target_type = self._field_text(node, "type")
        if any(t in target_type for t in UNCHECKED_ACCOUNT_TYPES):
            self.add_warning(
                f"Casting to unchecked account type ({target_type}) - ensure proper validation",
                "Validate the account before and after casting to an unchecked account type",
            )

    def check_arithmetic_operation(self, op: str) -> None:
        """
        Report an add/sub/mul operation.

        Args:
            op: Operator token (+, - or *)
        """
        op_name = ARITHMETIC_OPERATIONS[op]
        if not self.has_overflow_checks:
            self.add_vulnerability(
                Severity.HIGH,
                f"Potential arithmetic overflow/underflow detected in {op_name} operation",
                "Use checked arithmetic operations (checked_add, checked_sub, checked_mul) "
                "or enable overflow-checks = true in Cargo.toml",
            )
        else:
            self.add_info(f"Arithmetic operation with runtime overflow protection: {op_name} operation")

    def check_large_integer_literal(self, node: Node) -> None:
        """
        Warn about integer literals that do not fit in 32 bits.

        Args:
            node: integer_literal node
        """
        value = parse_int_literal(self._text(node))
        if value is not None and value > U32_MAX:
            self.add_warning(
                f"Large integer literal detected: {value}",
                "Consider using a smaller integer type or implementing proper overflow checks",
            )

    # === Struct Analysis ===
    def _outer_attributes(self, node: Node) -> List[Node]:
        attrs = []
        sibling = node.prev_named_sibling
        while sibling is not None and sibling.type in ("attribute_item", "line_comment", "block_comment"):
            if sibling.type == "attribute_item":
                attrs.append(sibling)
            sibling = sibling.prev_named_sibling
        attrs.reverse()
        return attrs

    def _is_doc_comment(self, node: Node) -> bool:
        if node.type not in ("line_comment", "block_comment"):
            return False
        text = self._text(node)
        if text.startswith("///"):
            return not text.startswith("////")
        return text.startswith("/**") and not text.startswith("/***") and text != "/**/"

    def _struct_fields(self, node: Node) -> List[Tuple[Node, List[Node]]]:
        """
        Pair each field with its attributes.

        Doc comments (`/// CHECK: ...`) are attributes in Rust and count as
        part of the field's constraint text.
        """
        body = node.child_by_field_name("body")
        if body is None or body.type != "field_declaration_list":
            return []
        fields = []
        pending: List[Node] = []
        for child in body.named_children:
            if child.type == "attribute_item" or self._is_doc_comment(child):
                pending.append(child)
            elif child.type == "field_declaration":
                inner = [c for c in child.named_children if c.type == "attribute_item"]
                fields.append((child, pending + inner))
                pending = []
        return fields

    def check_struct(self, node: Node) -> None:
        """
        Analyze a struct.

        Checks for:
        - Unconstrained or weakly constrained fields in Anchor Accounts structs
        - Missing is_initialized field in account data structs

        Args:
            node: struct_item node
        """
        struct_name = self._field_text(node, "name")
        is_accounts_struct = any("Accounts" in self._text(a) for a in self._outer_attributes(node))
        fields = self._struct_fields(node)

        if is_accounts_struct:
            self.add_info(f"Anchor Accounts struct detected: {struct_name}")
            for field_node, attrs in fields:
                self.check_account_field(field_node, attrs, struct_name)

        if "Account" in struct_name:
            self._update_location(node)
            self.add_info(f"Account struct detected - ensure proper validation: {struct_name}")
            if not is_accounts_struct:
                self.check_for_is_initialized_field(fields, struct_name)

    def check_for_is_initialized_field(self, fields: List[Tuple[Node, List[Node]]], struct_name: str) -> None:
        """Warn when an account data struct has no `is_initialized: bool` field."""
        has_is_initialized = any(
            self._field_text(f, "name") == IS_INITIALIZED and self._field_text(f, "type").strip() == "bool"
            for f, _ in fields
        )
        if not has_is_initialized:
            self.add_warning(
                f"Account struct {struct_name} missing is_initialized field",
                "Add an is_initialized: bool field to account structs to prevent reinitialization attacks",
            )

    def check_account_field(self, field_node: Node, attrs: List[Node], struct_name: str) -> None:
        """
        Analyze one field of an Anchor Accounts struct.

        Args:
            field_node: field_declaration node
            attrs: Attribute nodes attached to the field
            struct_name: Name of the containing struct
        """
        self._update_location(field_node)
        field_type = self._field_text(field_node, "type")
        field_name = self._field_text(field_node, "name") or "unnamed"
        attr_texts = [self._text(a) for a in attrs]

        self.check_unchecked_account_field(field_type, field_name, attr_texts, struct_name)
        self.check_typed_account_field(field_type, field_name, attr_texts, struct_name)

        for attr in attrs:
            if attr.type == "attribute_item":
                self.check_for_ata_init_issues(attr, field_name)

    def check_unchecked_account_field(
        self,
        field_type: str,
        field_name: str,
        attr_texts: List[str],
        struct_name: str
    ) -> None:
        """
        Check AccountInfo / UncheckedAccount fields for missing constraints.

        Args:
            field_type: Type of the field
            field_name: Name of the field
            attr_texts: Rendered attributes of the field
            struct_name: Name of the containing struct
        """
        type_label = next((t for t in UNCHECKED_ACCOUNT_TYPES if t in field_type), None)
        if type_label is None:
            return

        has_constraints = any(
            marker in attr for attr in attr_texts for marker in ACCOUNT_CONSTRAINT_MARKERS
        )
        program_like = is_program_field(field_name)

        if not has_constraints:
            if program_like:
                self.add_vulnerability(
                    Severity.CRITICAL,
                    f"Unchecked {type_label} in struct {struct_name}: field {field_name} "
                    f"(potential arbitrary CPI vulnerability)",
                    "Use Program<'info, T> for program accounts so Anchor verifies the program id, "
                    "or add an address constraint (#[account(address = <PROGRAM_ID>)]).",
                )
            else:
                self.add_vulnerability(
                    Severity.HIGH,
                    f"Unchecked account reference in struct {struct_name}: field {field_name} ({type_label})",
                    "Add proper constraints to unchecked account fields using Anchor attributes "
                    "(e.g., #[account(...)]) or use a typed account wrapper.",
                )
        elif program_like:
            self.add_warning(
                f"Program account {field_name} in struct {struct_name} uses {type_label}",
                "Prefer Program<'info, T> over raw account types for program references.",
            )

    def check_typed_account_field(
        self,
        field_type: str,
        field_name: str,
        attr_texts: List[str],
        struct_name: str
    ) -> None:
        """
        Check Account<'info, T> fields for owner, init and PDA constraints.

        Args:
            field_type: Type of the field
            field_name: Name of the field
            attr_texts: Rendered attributes of the field
            struct_name: Name of the containing struct
        """
        if not TYPED_ACCOUNT_RE.search(field_type):
            return

        joined = " ".join(attr_texts)
        if "owner" not in joined:
            self.add_warning(
                f"Missing owner check for Account in struct {struct_name}: field {field_name}",
                "Add #[account(owner = <PROGRAM_ID>)] to ensure the account is owned by the expected program.",
            )

        if "space" in joined and "init" not in joined:
            self.add_warning(
                f"Account space specified without init constraint in struct {struct_name}: field {field_name}",
                "Add the init constraint when specifying space: #[account(init, space = ...)]",
            )

        if "init_if_needed" in joined:
            self.add_warning(
                f"Using init_if_needed in struct {struct_name}: field {field_name}",
                "init_if_needed can be risky. Ensure the instruction handler includes checks "
                "to prevent resetting the account to its initial state.",
            )

        for attr in attr_texts:
            if attribute_path(attr) == "account":
                self.check_bump_constraint(attr, field_name, struct_name)

    def check_bump_constraint(self, attr_text: str, field_name: str, struct_name: str) -> None:
        """
        Inspect seeds/bump constraints of an account attribute.

        Args:
            attr_text: Rendered #[account(...)] attribute
            field_name: Name of the field
            struct_name: Name of the containing struct
        """
        if SEEDS_RE.search(attr_text) and not BUMP_RE.search(attr_text):
            self.add_warning(
                f"PDA seeds without bump constraint in struct {struct_name}: field {field_name}",
                "Add the bump constraint next to seeds so Anchor validates the canonical bump.",
            )

        match = BUMP_ASSIGN_RE.search(attr_text)
        if not match:
            return

        bump_expr = match.group(1).strip()
        literal = BUMP_LITERAL_RE.match(bump_expr)
        if literal and int(literal.group(1)) in NON_CANONICAL_BUMPS:
            self.add_vulnerability(
                Severity.CRITICAL,
                f"Hardcoded non-canonical bump ({bump_expr}) in struct {struct_name}: field {field_name}",
                "Never hardcode bump values. Use the bare bump constraint or a stored canonical bump.",
            )
        else:
            self.add_warning(
                f"Explicit bump value in struct {struct_name}: field {field_name} - verify canonical bump",
                "Make sure the bump stored or supplied here is the canonical bump from find_program_address.",
            )

    def check_for_ata_init_issues(self, attr: Node, field_name: str) -> None:
        """
        Check for associated token accounts created with `init`.

        Args:
            attr: Attribute node of the field
            field_name: Name of the field
        """
        attr_text = self._text(attr)
        if attribute_path(attr_text) != "account":
            return

        self._update_location(attr)
        if "associated_token" not in attr_text and not is_ata_field(field_name):
            return

        has_init = any(
            "init" in part and "init_if_needed" not in part for part in attr_text.split(",")
        )
        if has_init and "init_if_needed" not in attr_text:
            self.add_vulnerability(
                Severity.CRITICAL,
                f"Associated token account '{field_name}' initialized with init instead of init_if_needed",
                "Use 'init_if_needed' for associated token accounts to handle cases where users already "
                "have ATAs created. Using 'init' will fail if the account already exists.",
            )

    # === Enum Analysis ===
    def check_enum(self, node: Node) -> None:
        """Note error enums; nothing else is checked on enums."""
        enum_name = self._field_text(node, "name")
        if "Error" in enum_name:
            self.add_info(f"Error enum detected - ensure proper error handling: {enum_name}")
