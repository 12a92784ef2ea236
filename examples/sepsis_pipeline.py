#!/usr/bin/env python3
"""Example: anchor-first tokenization of ICU lactate measurements.

This script builds an ECDF from synthetic lactate values, bins it with the
Surviving Sepsis thresholds preserved as exact boundaries, tokenizes a
HuggingFace dataset of patient stays and writes a project archive.
"""

import numpy as np
import pandas as pd
from datasets import Dataset

from clinquant import AnchorTokenizer, validate_anchor_preservation
from clinquant.catalog import default_config
from clinquant.export import VariableExport, export_project, generate_report
from clinquant.integrations.huggingface import DatasetTokenizer
from clinquant.utils import build_ecdf, data_range_of
from clinquant.validation import check_bin_sparsity, validate_configuration


def create_sample_stays(n_stays=200, max_length=24):
    """Create a dataset of lactate series, one row per ICU stay."""
    np.random.seed(42)

    series = []
    for _ in range(n_stays):
        length = np.random.randint(4, max_length)
        baseline = np.random.lognormal(mean=0.4, sigma=0.5)
        values = baseline * np.exp(np.cumsum(np.random.normal(0, 0.1, size=length)))
        # roughly one charted value in ten is missing
        values[np.random.rand(length) < 0.1] = np.nan
        series.append(np.round(values, 1).tolist())

    return Dataset.from_dict({"lactate": series, "stay_id": list(range(n_stays))})


def example_fit_and_validate(dataset):
    """Fit a tokenizer from the catalog defaults and check the result."""
    print("=== Fit lactate tokenizer ===")

    samples = np.concatenate([np.asarray(s, dtype=float) for s in dataset["lactate"]])
    ecdf = build_ecdf(samples)
    data_range = data_range_of(ecdf)
    print(f"ECDF: {len(ecdf)} distinct values in [{data_range.min}, {data_range.max}]")

    config = default_config("lactate", data_range)
    report = validate_configuration(config, ecdf, data_range)
    for message in report.errors + report.warnings:
        print(f"  [{message.severity}] {message.field}: {message.message}")

    tokenizer = AnchorTokenizer.fit(config, ecdf, data_range)
    print(tokenizer)
    print(f"Anchors preserved: {validate_anchor_preservation(tokenizer.bins, config.anchor_values)}")
    for message in check_bin_sparsity(tokenizer.bins):
        print(f"  [sparse] {message.message}")
    print()
    return tokenizer


def example_dataset_tokenization(tokenizer, dataset):
    """Tokenize every stay with ``dataset.map``."""
    print("=== Tokenize HuggingFace dataset ===")

    ds_tokenizer = DatasetTokenizer(tokenizer, input_column="lactate", output_column="tokens")
    tokenized = ds_tokenizer.transform(dataset, batch_size=50, as_ids=True)

    sample = tokenized[0]
    print(f"Values: {sample['lactate'][:6]}...")
    print(f"Tokens: {sample['tokens'][:6]}...")

    indices = tokenizer.encode_batch(
        np.concatenate([np.asarray(s, dtype=float) for s in dataset["lactate"]])
    )
    print(f"Vocab utilization: {tokenizer.get_vocab_utilization(indices):.3f}")
    print()


def example_dataframe_tokenization(tokenizer):
    """Tokenize a long-format table of charted values."""
    print("=== Tokenize DataFrame ===")

    df = pd.DataFrame({
        "stay_id": [1, 1, 2, 2],
        "lactate": [1.2, 2.0, 4.4, np.nan],
    })
    print(tokenizer.tokenize_frame(df, "lactate"))
    print()


def example_export(tokenizer, path="lactate_project.zip"):
    """Write documentation and a project archive."""
    print("=== Export ===")

    report = generate_report(tokenizer.bins, tokenizer.config)
    print("\n".join(report.splitlines()[:8]))

    members = export_project("sepsis", [VariableExport(tokenizer.config, tokenizer.bins)], path)
    print(f"Wrote {len(members)} files to {path}")
    print()


if __name__ == "__main__":
    stays = create_sample_stays()
    lactate_tokenizer = example_fit_and_validate(stays)
    example_dataset_tokenization(lactate_tokenizer, stays)
    example_dataframe_tokenization(lactate_tokenizer)
    example_export(lactate_tokenizer)
