"""Hugging Face Datasets integration for clinquant tokenizers.

Provides a Features schema and dataset mapping functions that turn a column
of raw measurements into token indices or token ids.
"""

from typing import Any, Callable, Dict

try:
    from datasets import Features, Sequence, Value
    HAS_DATASETS = True
except ImportError:
    HAS_DATASETS = False

from ..tokenizers.anchor_tokenizer import AnchorTokenizer


def tokens_feature(name: str = "tokens", as_ids: bool = False) -> "Features":
    """Create HF Features schema for a tokenized measurement column.

    Parameters
    ----------
    name : str
        Name of the tokens column.
    as_ids : bool
        Whether the column holds token id strings instead of indices.
    """
    if not HAS_DATASETS:
        raise ImportError("datasets package required for HF integration")

    return Features({name: Sequence(Value("string" if as_ids else "int32"))})


def create_tokenize_map_fn(
    tokenizer: AnchorTokenizer,
    input_column: str = "values",
    output_column: str = "tokens",
    as_ids: bool = False,
) -> Callable:
    """Create a batched map function for ``dataset.map(batched=True)``.

    Each row of ``input_column`` is a sequence of measurements. Indices
    use -1 for values outside the vocabulary; ids use ``"missing"`` for NaN
    and raise for out-of-range values.
    """
    def tokenize_fn(batch: Dict[str, Any]) -> Dict[str, Any]:
        batch_tokens = []
        for row in batch[input_column]:
            values = [float("nan") if v is None else float(v) for v in row]
            if as_ids:
                batch_tokens.append(tokenizer.encode_ids(values))
            else:
                batch_tokens.append(tokenizer.encode_batch(values).tolist())
        return {**batch, output_column: batch_tokens}

    return tokenize_fn


class DatasetTokenizer:
    """High-level wrapper for tokenizing HF datasets.

    Parameters
    ----------
    tokenizer : AnchorTokenizer
        Tokenizer built from finished bins.
    input_column : str
        Input column name.
    output_column : str
        Output column name.
    """

    def __init__(
        self,
        tokenizer: AnchorTokenizer,
        input_column: str = "values",
        output_column: str = "tokens",
    ):
        if not HAS_DATASETS:
            raise ImportError("datasets package required for DatasetTokenizer")

        self.tokenizer = tokenizer
        self.input_column = input_column
        self.output_column = output_column

    def transform(self, dataset, num_proc: int = 1, batch_size: int = 1000, as_ids: bool = False):
        """Map the dataset's input column to tokens."""
        map_fn = create_tokenize_map_fn(
            self.tokenizer,
            self.input_column,
            self.output_column,
            as_ids=as_ids,
        )
        return dataset.map(
            map_fn,
            batched=True,
            batch_size=batch_size,
            num_proc=num_proc,
            desc="Tokenizing measurements",
        )
