"""
Core package aggregator for varcodec contracts (grammar, constants, errors, typing, serde).

## Contracts (single source of truth)
- Grammar: type codes, EBNF, TypeNode union, SignatureCursor, recognizer, pattern matching.
- Constants: the signature alphabet, integer ranges, default limits.
- Errors: GrammarError, VariantTypeError and friends.
- Typing: the VariantLike container protocol.
- Serde: canonical JSON for the command line.

## Notes
- Zero-IO policy: stdlib only; no file/network IO beyond reading the bundled EBNF.
- The recognizer never caches parse results; every call starts from the text it is given.

## Downstream usage
- varcodec.host builds and validates containers using `grammar`.
- varcodec.codec packs against `SignatureCursor`/`read_one` and unpacks via `VariantLike`.

## Examples
```python
from varcodec.core.grammar import parse_signature, type_matches
parse_signature("a{sv}").type_string  # 'a{sv}'
type_matches("a{sv}", "a{?*}")  # True
```
"""
