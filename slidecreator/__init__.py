"""
SlideCreator - assemble presentations from source documents with AI generation.

Two generation paths:

- **Single-shot**: one prompt pair, one completion, one presentation resource
- **Pipelines**: an ordered list of named steps executed in the background,
  where later steps consume earlier steps' raw outputs and clients poll a
  persisted run record for progress

Prompts reference shared snippets ("output formats") with `{{name}}`
placeholders; generation prompts, system prompts, output formats and
pipelines share one unique-name namespace.

Quick Start:
    >>> from slidecreator.pipeline import PipelineRunEngine
    >>> engine = PipelineRunEngine(store, resolver, client)
    >>> run = await engine.launch(
    ...     pipeline_id=pipeline.id,
    ...     project_id=project.id,
    ...     source_resource_ids=[doc.id],
    ... )
    >>> run = await engine.get_run(run.id)
"""

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
]
