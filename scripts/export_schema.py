#!/usr/bin/env python
"""
Export the GraphQL schema (SDL) and the REST OpenAPI document
"""
import json
import sys
from pathlib import Path

# Add project root and src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "src"))

try:
    from api_server import app
    from retro_meeting.graphql import schema

    docs_dir = project_root / "docs"
    docs_dir.mkdir(parents=True, exist_ok=True)

    sdl_path = docs_dir / "schema.graphql"
    sdl = schema.as_str()
    sdl_path.write_text(sdl + "\n", encoding="utf-8")

    openapi_schema = app.openapi()
    openapi_path = docs_dir / "openapi.json"
    with open(openapi_path, "w", encoding="utf-8") as f:
        json.dump(openapi_schema, f, indent=2, ensure_ascii=False)

    print(f"✓ GraphQL schema exported to {sdl_path}")
    print(f"  Types: {sdl.count('type ')}")
    print(f"✓ OpenAPI schema exported to {openapi_path}")
    print(f"  Endpoints: {len(openapi_schema.get('paths', {}))}")

except Exception as e:
    print(f"✗ Error exporting schemas: {e}", file=sys.stderr)
    sys.exit(1)
