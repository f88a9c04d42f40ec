def describe_validation_error(exc) -> str:
    """Turn a pydantic / FastAPI error list into one readable sentence"""
    problems = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "form")]
        field = ".".join(loc) or "request"
        if err.get("type") == "missing":
            problems.append(f"{field} is required")
        else:
            msg = err.get("msg", "is invalid")
            problems.append(f"{field}: {msg.removeprefix('Value error, ')}")
    return "Validation failed: " + "; ".join(problems)
