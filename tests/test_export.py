"""Tests for bin exports."""

import io
import json
import math
import zipfile

import pandas as pd
import pytest

from clinquant import generate_bins
from clinquant.export import (
    VariableExport,
    bins_to_frame,
    build_manifest,
    export_project,
    export_variable,
    generate_manifest,
    generate_report,
    generate_source,
    load_manifest,
    to_csv,
)
from clinquant.export.tabular import COLUMNS
from clinquant.tokenizers import AnchorTokenizer
from clinquant.types import ClinicalAnchor, DataRange, VariableConfig


@pytest.fixture
def config(lactate_config):
    return VariableConfig.from_dict(dict(lactate_config, domain="labs"))


@pytest.fixture
def bins(config, uniform_ecdf):
    return generate_bins(config, uniform_ecdf, DataRange(0, 10))


def load_generated(source):
    namespace = {}
    exec(compile(source, "<generated>", "exec"), namespace)
    return namespace


class TestTabular:

    def test_frame(self, bins, config):
        frame = bins_to_frame(bins, config)

        assert list(frame.columns) == COLUMNS
        assert len(frame) == len(bins)
        assert (frame["variable"] == "lactate").all()

    def test_csv_formatting(self, bins, config):
        frame = pd.read_csv(io.StringIO(to_csv(bins, config)), dtype=str)

        assert list(frame.columns) == COLUMNS
        assert frame["lower_bound"].iloc[0] == "0.0000"
        assert frame["upper_bound"].iloc[-1] == "10.0000"
        assert all(len(p.split(".")[1]) == 2 for p in frame["data_percentage"])


class TestSource:

    def test_generated_function_matches_tokenizer(self, bins, config):
        namespace = load_generated(generate_source(bins, config))
        tokenize = namespace["tokenize_lactate"]
        tokenizer = AnchorTokenizer(bins)

        for value in [0.0, 0.5, 1.99, 2.0, 3.7, 4.0, 9.99, 10.0]:
            assert tokenize(value) == tokenizer.bins[tokenizer.encode_scalar(value)].id
        for b in bins:
            assert tokenize(b.lower) == b.id

    def test_missing_and_out_of_range(self, bins, config):
        namespace = load_generated(generate_source(bins, config))
        tokenize = namespace["tokenize_lactate"]

        assert tokenize(None) == "missing"
        assert tokenize(math.nan) == "missing"
        with pytest.raises(ValueError):
            tokenize(10.5)
        assert namespace["tokenize_lactate_batch"]([1.0, None])[1] == "missing"

    def test_bin_definitions(self, bins, config):
        namespace = load_generated(generate_source(bins, config, generated_at="2024-01-01"))
        definitions = namespace["BIN_DEFINITIONS"]

        assert list(definitions) == [b.id for b in bins]
        assert definitions[bins[3].id]["lower"] == bins[3].lower

    def test_header(self, bins, config):
        source = generate_source(bins, config, generated_at="2024-01-01")

        assert "Variable: lactate" in source
        assert "Generated: 2024-01-01" in source
        assert "Generated:" not in generate_source(bins, config)

    def test_empty_bins(self, config):
        with pytest.raises(ValueError):
            generate_source([], config)


class TestManifest:

    def test_contents(self, bins, config):
        manifest = build_manifest(bins, config, generated_at="2024-01-01")

        assert manifest["meta"]["generator"] == "clinquant"
        assert manifest["variable"]["direction"] == "higher_is_worse"
        assert manifest["statistics"]["anchors_preserved"] is True
        assert manifest["statistics"]["total_bins"] == len(bins)
        assert manifest["statistics"]["data_range"] == {"min": 0.0, "max": 10.0}

    def test_load(self, bins, config):
        text = generate_manifest(bins, config)
        loaded_config, loaded_bins = load_manifest(text)

        assert loaded_config == config
        assert loaded_bins == list(bins)
        assert json.loads(text)["clinical_anchors"][0]["label"] == "Sepsis threshold"


class TestReport:

    def test_sections(self, bins, config):
        report = generate_report(bins, config)

        assert report.startswith("# Clinical Tokenization Documentation: lactate")
        for heading in ("## Normal Range", "## Clinical Anchors", "## Bin Definitions",
                        "## Usage", "## Validation"):
            assert heading in report
        assert "Sepsis threshold" in report
        assert "**Anchor Preservation:** passed" in report
        assert "Anchor boundary" in report

    def test_without_anchors(self, uniform_ecdf):
        config = VariableConfig(name="x")
        bins = generate_bins(config, uniform_ecdf, DataRange(0, 10))
        report = generate_report(bins, config)

        assert "*No clinical anchors defined*" in report
        assert "*No normal range defined*" in report
        assert "Anchor boundary" not in report

    def test_failed_preservation(self, bins):
        config = VariableConfig(name="lactate", anchors=(ClinicalAnchor(3.333),))

        assert "**Anchor Preservation:** FAILED" in generate_report(bins, config)


class TestBundle:

    def test_export_variable(self, bins, config):
        files = export_variable(bins, config)

        assert set(files) == {
            "bin_definitions_lactate.csv",
            "tokenize_lactate.py",
            "clinical_documentation_lactate.md",
            "specification_lactate.json",
        }

    def test_export_project(self, tmp_path, bins, config, uniform_ecdf):
        hr = VariableConfig(name="Heart Rate", unit="bpm", domain="vitals")
        hr_bins = generate_bins(hr, uniform_ecdf, DataRange(0, 10))
        empty = VariableExport(VariableConfig(name="unused"), [])
        path = tmp_path / "project.zip"

        members = export_project(
            "ICU", [VariableExport(config, bins), VariableExport(hr, hr_bins), empty], path
        )

        assert "labs/lactate/lactate_bins.csv" in members
        assert "vitals/heart_rate/heart_rate_tokenize.py" in members
        assert not any("unused" in m for m in members)
        with zipfile.ZipFile(path) as zf:
            assert sorted(zf.namelist()) == sorted(members)
            master = zf.read("tokenize_all_variables.py").decode()
            summary = zf.read("project_summary.md").decode()
        assert "from labs.lactate.lactate_tokenize import tokenize_lactate" in master
        assert "| Heart Rate | vitals | bpm |" in summary

    def test_duplicate_names(self, tmp_path, bins, config):
        with pytest.raises(ValueError, match="Duplicate"):
            export_project("x", [VariableExport(config, bins)] * 2, tmp_path / "x.zip")
