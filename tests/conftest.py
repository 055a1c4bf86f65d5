"""Shared pytest fixtures for the viewscaffold test suite.

Provides reusable fixtures for:
- Sample C# model and controller sources
- A temporary ASP.NET Core project tree
- A fake clock, file stat and sweep scheduler for cache tests
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from viewscaffold.config import Config, ParserConfig
from viewscaffold.parser.cache import ExtractionCache, SweepHandle, SweepScheduler
from viewscaffold.parser.extractor import ModelPropertyExtractor


# ---------------------------------------------------------------------------
# Sample sources
# ---------------------------------------------------------------------------

PRODUCT_SOURCE = textwrap.dedent("""\
    using System;
    using System.ComponentModel;
    using System.ComponentModel.DataAnnotations;
    using System.ComponentModel.DataAnnotations.Schema;

    namespace Shop.Models
    {
        // A product sold in the shop { not a brace }
        public class Product
        {
            public int Id { get; set; }

            [Required]
            [StringLength(100, MinimumLength = 3)]
            [Display(Name = "Product name")]
            public string Name { get; set; }

            [Description("Long text")]
            public string? Description { get; set; }

            [Column(TypeName = "decimal(18,2)")]
            public decimal Price { get; set; }

            [EmailAddress]
            public string ContactEmail { get; set; }

            public bool InStock { get; set; }

            public DateTime? ReleaseDate { get; set; }

            public int CategoryId { get; set; }

            [NotMapped]
            public string DisplayLabel { get; set; }

            public DateTime CreatedAt { get; set; }

            public string Notes = "not a property { get; set; }";

            public decimal Total() { return Price; }
        }
    }
""")

PRODUCT_CONTROLLER_SOURCE = textwrap.dedent("""\
    using Microsoft.AspNetCore.Mvc;

    namespace Shop.Controllers
    {
        public class ProductController : Controller
        {
            // GET: Product
            public IActionResult Index()
            {
                return View();
            }

            // GET: Product/Details/5
            public async Task<IActionResult> Details(int id)
            {
                return View();
            }

            // POST: Product/Create
            [HttpPost]
            [ValidateAntiForgeryToken]
            public IActionResult Create([Bind("Id,Name,Description,Price")] Product product)
            {
                return RedirectToAction(nameof(Index));
            }

            public ActionResult<Product> Search(string query = "a, b", int page = 1)
            {
                return View();
            }
        }
    }
""")


@pytest.fixture
def product_source() -> str:
    """C# source of a ``Shop.Models.Product`` entity."""
    return PRODUCT_SOURCE


@pytest.fixture
def controller_source() -> str:
    """C# source of a ``ProductController`` with several actions."""
    return PRODUCT_CONTROLLER_SOURCE


# ---------------------------------------------------------------------------
# Project tree
# ---------------------------------------------------------------------------

@pytest.fixture
def shop_project(tmp_path: Path) -> Path:
    """Solution folder with one ``Shop`` project holding a model and a controller."""
    workspace = tmp_path / "workspace"
    project = workspace / "Shop"
    (project / "Models").mkdir(parents=True)
    (project / "Controllers").mkdir()
    (project / "Shop.csproj").write_text("<Project Sdk=\"Microsoft.NET.Sdk.Web\" />\n", encoding="utf-8")
    (project / "Models" / "Product.cs").write_text(PRODUCT_SOURCE, encoding="utf-8")
    (project / "Controllers" / "ProductController.cs").write_text(
        PRODUCT_CONTROLLER_SOURCE, encoding="utf-8"
    )
    return workspace


@pytest.fixture
def write_cs(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a ``.cs`` file (path relative to ``tmp_path``) and return its path."""

    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Cache doubles
# ---------------------------------------------------------------------------

class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStat:
    """Modification times keyed by path; unknown paths raise ``FileNotFoundError``."""

    def __init__(self) -> None:
        self.mtimes: dict[str, float] = {}
        self.calls = 0

    def __call__(self, path: str) -> float:
        self.calls += 1
        try:
            return self.mtimes[path]
        except KeyError:
            raise FileNotFoundError(path) from None


class FakeHandle(SweepHandle):
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler(SweepScheduler):
    """Records scheduled callbacks; tests fire them with :meth:`tick`."""

    def __init__(self) -> None:
        self.scheduled: list[tuple[float, Callable[[], object], FakeHandle]] = []

    def schedule(self, interval: float, callback: Callable[[], object]) -> SweepHandle:
        handle = FakeHandle()
        self.scheduled.append((interval, callback, handle))
        return handle

    def tick(self) -> list[object]:
        return [callback() for _, callback, handle in self.scheduled if not handle.cancelled]


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_stat() -> FakeStat:
    return FakeStat()


@pytest.fixture
def fake_scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def cache(fake_clock: FakeClock, fake_stat: FakeStat) -> ExtractionCache:
    """Small cache driven by the fake clock and stat."""
    return ExtractionCache(max_entries=3, expiration_seconds=300, clock=fake_clock, stat=fake_stat)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

@pytest.fixture
def extractor() -> ModelPropertyExtractor:
    """Extractor with its own real-clock cache, isolated from the process cache."""
    return ModelPropertyExtractor(cache=ExtractionCache(), config=ParserConfig())


@pytest.fixture
def config() -> Config:
    return Config()
