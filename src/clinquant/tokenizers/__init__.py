from .anchor_tokenizer import MISSING_TOKEN, AnchorTokenizer

__all__ = ["AnchorTokenizer", "MISSING_TOKEN"]
