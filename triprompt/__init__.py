"""
TriPrompt: turn a writing goal into an improved prompt and a final draft.

The package groups the pipeline, its agents and the local store. Most
callers only need the session or the pipeline:

```python
from triprompt import RunSession, TriPromptConfig

session = RunSession.from_config(TriPromptConfig.from_env())
session.goal = "Announce our new pricing to existing customers"
session.run()
```
"""

from .config import TriPromptConfig  # noqa: F401
from .errors import SynthesisError, TriPromptError  # noqa: F401
from .pipeline import TriPromptAgent  # noqa: F401
from .session import AppStatus, RunSession  # noqa: F401

__all__ = ["AppStatus", "RunSession", "SynthesisError", "TriPromptAgent", "TriPromptConfig", "TriPromptError"]
