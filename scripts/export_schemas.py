"""Export JSON schemas for the reflow request, response, and itinerary."""

import json
from pathlib import Path

from backend.reflow.models import Itinerary, ReflowErrorResponse, ReflowRequest, ReflowResponse

SCHEMAS = {
    "Itinerary": Itinerary,
    "ReflowRequest": ReflowRequest,
    "ReflowResponse": ReflowResponse,
    "ReflowErrorResponse": ReflowErrorResponse,
}


def main() -> None:
    """Export schemas to docs/schemas/."""
    schemas_dir = Path("docs/schemas")
    schemas_dir.mkdir(parents=True, exist_ok=True)

    for name, model in SCHEMAS.items():
        schema = model.model_json_schema(by_alias=True)
        path = schemas_dir / f"{name}.schema.json"
        with open(path, "w") as f:
            json.dump(schema, f, indent=2)
        print(f"Exported {name} schema to {path}")


if __name__ == "__main__":
    main()
