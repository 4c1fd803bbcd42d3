"""Core pipeline and intermediate representation modules.

WHY: The core package holds the stable heart of the app: the IR
dataclasses, the caption generation pipeline, and the frame lookups the
renderer relies on. Formatters, the API and the CLI all build on these.

HOW: ir.py defines the data structures, pipeline.py runs the caption
engine over a transcription, playback.py maps frames to active chunks and
words.

RULES:
- IR dataclasses are the contract; change with care
- The pipeline is format-agnostic; no formatter-specific logic here
"""
