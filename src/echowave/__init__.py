"""
EchoWave Survey Lifecycle Package

Domain rules for anonymous-feedback surveys:
    - Creating surveys from templates with a minimum-response threshold
    - Accepting anonymous responses
    - Gating results and summaries behind the anonymity threshold
    - Closing surveys (one-way)

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Rendering or navigation
    - Network transport
    - Storage engines
    - How summaries are generated

Identity is supplied by an external collaborator (see echowave.auth).
"""

__version__ = "0.1.0"
