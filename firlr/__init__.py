"""Grammar analysis, LR(0) parse tables, EBNF rule lowering and a FIRRTL tokenizer."""

__version__ = "0.1.0"
__all__ = ["grammar", "lr0", "tokenizer", "metagrammar", "demo"]