"""Content-Security-Policy <meta> tags for generated pages.

See https://www.w3.org/TR/CSP2/ for the directive semantics.
"""

import base64
import hashlib
from collections import defaultdict
from html import escape
from typing import Dict, List

DEFAULT = 'default-src'
CHILD = 'child-src'
CONNECT = 'connect-src'
IMG = 'img-src'
SCRIPT = 'script-src'
STYLE = 'style-src'
FRAME = 'frame-src'  # superseded by child-src in CSP 2

NONE = "'none'"
SELF = "'self'"

DIRECTIVE_ORDER = [DEFAULT, CHILD, CONNECT, IMG, SCRIPT, STYLE, FRAME]


class CspBuilder:
    def __init__(self):
        self._sources: Dict[str, List[str]] = defaultdict(list)

    def add(self, directive: str, source: str) -> 'CspBuilder':
        """Add a raw, already-quoted source expression to a directive."""
        self._sources[directive].append(source)
        # Firefox for Android still lacks child-src.
        if directive == CHILD:
            self._sources[FRAME].append(source)
        return self

    def hash(self, directive: str, content: str) -> 'CspBuilder':
        """Allow one inline script or style by its sha256 hash."""
        digest = base64.b64encode(hashlib.sha256(content.encode('utf-8')).digest()).decode('ascii')
        return self.add(directive, f"'sha256-{digest}'")

    def policy(self) -> str:
        parts = []
        for directive in DIRECTIVE_ORDER:
            sources = self._sources.get(directive)
            if not sources:
                continue
            policy = ' '.join(sources)
            # CSP 2 browsers ignore 'unsafe-inline' once a hash is present.
            if directive in (SCRIPT, STYLE) and "'sha256-" in policy:
                policy += " 'unsafe-inline'"
            parts.append(f'{directive} {policy}')
        return '; '.join(parts)

    def tag(self) -> str:
        return f'<meta http-equiv="Content-Security-Policy" content="{escape(self.policy(), quote=False)}">'
