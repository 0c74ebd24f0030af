"""
ortweb-e2e: end-to-end test runner for the packed onnxruntime-web package.

Stages an isolated workspace, installs the packed npm packages and runs the
Node.js and browser test matrix one command at a time.
"""

__version__ = "0.1.0"
