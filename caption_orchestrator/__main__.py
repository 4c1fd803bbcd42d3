"""Package entry point for ``python -m caption_orchestrator``.

WHY: Users run the generator as ``python -m caption_orchestrator
transcription.json``. Python's ``-m`` flag looks for ``__main__.py`` inside
the package and executes it.

RULES:
- This file must exist for ``python -m caption_orchestrator`` to work
- All arguments are handled by the CLI's main()
"""

from caption_orchestrator.cli import main

if __name__ == "__main__":
    main()
