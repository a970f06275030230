from config import app

@app.template_filter()
def rounded(value, placeholder="--"):
    if value is None or value == "":
        return placeholder
    if isinstance(value, float):
        return round(value)
    return value
