import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.join(ROOT, 'Wiktionary', 'MetaphorDip'))
sys.path.insert(0, os.path.join(ROOT, 'MCP_servers'))
