"""Math protection: shield LaTeX from the markdown parser and restore it afterwards"""

import re
import secrets
from dataclasses import dataclass, field


CODE_FENCE_RE = re.compile(r'^( {0,3})(`{3,}|~{3,})[^\r\n]*\r?\n[\s\S]*?\r?\n\1\2[ \t]*$', re.MULTILINE)
CODE_SPAN_RE = re.compile(r'(`+)(?:[^`\n]|`(?!\1))+?\1')

DOLLAR_BLOCK_RE = re.compile(r'^\$\$[ \t]*\r?\n[\s\S]*?\r?\n\$\$[ \t]*$', re.MULTILINE)
BRACKET_BLOCK_RE = re.compile(r'^\\\[[ \t]*\r?\n[\s\S]*?\r?\n\\\][ \t]*$', re.MULTILINE)
DOLLAR_DISPLAY_RE = re.compile(r'\$\$[^\n]+?\$\$')
BRACKET_DISPLAY_RE = re.compile(r'\\\[[^\n]*?\\\]')
PAREN_INLINE_RE = re.compile(r'\\\([^\n]*?\\\)')
DOLLAR_INLINE_RE = re.compile(r'(?<!\\)\$(?!\s)(?:[^\n$]|\\\$)+?(?<!\s)(?<!\\)\$')
ESCAPED_DOLLAR_RE = re.compile(r'\\\$')

LINK_RE = re.compile(r'\[([^\]]*)\]\([^)]+\)')
MATH_SYNTAX_RE = re.compile(
    r'(?<!\\)\$[^$\n]+\$|(?<!\\)\$\$[\s\S]+?\$\$|\\\([^\n]+?\\\)|\\\[[\s\S]+?\\\]'
)

MATH_IGNORE_CLASS = "mdpdf-math-ignore"
LITERAL_DOLLAR_HTML = f'<span class="{MATH_IGNORE_CLASS}" aria-hidden="true">&#36;</span>'


@dataclass
class MathProtection:
    """Guarded text plus the guard maps needed to undo the substitution.

    Guard ids are alphanumeric only, so the markdown parser passes them through
    as plain text, and end in 'Q' so that no id is a prefix of another.
    """
    text: str
    math_guards: dict[str, str] = field(default_factory=dict)
    dollar_guards: dict[str, str] = field(default_factory=dict)

    def _restore_math(self, value: str) -> str:
        for guard, original in self.math_guards.items():
            value = value.replace(guard, original)
        return value

    def restore_plain(self, value: str) -> str:
        """Put LaTeX back verbatim and turn escaped dollars into a bare '$'."""
        value = self._restore_math(value)
        for guard in self.dollar_guards:
            value = value.replace(guard, '$')
        return value

    def restore_html(self, value: str) -> str:
        """Put LaTeX back verbatim and turn escaped dollars into an inert HTML entity."""
        value = self._restore_math(value)
        for guard in self.dollar_guards:
            value = value.replace(guard, LITERAL_DOLLAR_HTML)
        return value

    def restore_code(self, value: str) -> str:
        """Put code back exactly as written, escaped dollars included."""
        value = self._restore_math(value)
        for guard, original in self.dollar_guards.items():
            value = value.replace(guard, original)
        return value


class _GuardFactory:
    def __init__(self) -> None:
        self.nonce = secrets.token_hex(6)
        self.count = 0

    def guard(self, pattern: re.Pattern, text: str, kind: str, store: dict[str, str]) -> str:
        def replace(m: re.Match) -> str:
            self.count += 1
            guard = f"MDPDF{self.nonce}{kind}{self.count}Q"
            store[guard] = m.group(0)
            return guard
        return pattern.sub(replace, text)


def protect_math(content: str) -> MathProtection:
    """Replace math spans with opaque guards, leaving code untouched.

    Code fences and spans are guarded first so math-looking text inside them is
    never matched, then restored before returning so the markdown parser still
    sees them as code.
    """
    factory = _GuardFactory()
    code_guards: dict[str, str] = {}
    math_guards: dict[str, str] = {}
    dollar_guards: dict[str, str] = {}

    text = factory.guard(CODE_FENCE_RE, content, 'C', code_guards)
    text = factory.guard(CODE_SPAN_RE, text, 'C', code_guards)

    for pattern in (
        DOLLAR_BLOCK_RE, BRACKET_BLOCK_RE,
        DOLLAR_DISPLAY_RE, BRACKET_DISPLAY_RE,
        PAREN_INLINE_RE, DOLLAR_INLINE_RE,
    ):
        text = factory.guard(pattern, text, 'M', math_guards)

    text = factory.guard(ESCAPED_DOLLAR_RE, text, 'D', dollar_guards)

    def unguard_code(value: str) -> str:
        for guard, code in code_guards.items():
            value = value.replace(guard, code)
        return value

    # Math may span a code span, so its stored source can hold code guards too.
    text = unguard_code(text)
    math_guards = {guard: unguard_code(source) for guard, source in math_guards.items()}

    return MathProtection(text=text, math_guards=math_guards, dollar_guards=dollar_guards)


def has_math_syntax(content: str) -> bool:
    """True if content outside code and link targets contains a math delimiter pair."""
    sanitized = CODE_FENCE_RE.sub('', content)
    sanitized = CODE_SPAN_RE.sub('', sanitized)
    sanitized = LINK_RE.sub(r'\1', sanitized)
    return bool(MATH_SYNTAX_RE.search(sanitized))
