import marimo

__generated_with = "0.13.15"
app = marimo.App(width="medium")


@app.cell
async def _():
    import marimo as mo
    import pandas as pd
    import sys
    if "pyodide" in sys.modules:  # make sure we're running in pyodide/WASM
        import micropip

        # catna is not on PyPI. Build a wheel with `python -m build` and serve
        # dist/ next to the exported notebook so this relative URL resolves.
        await micropip.install("dist/catna-0.1.0-py3-none-any.whl")
    from catna import encode, explicit_na, vectors_equal, codes_equal, diff_positions
    from catna.narrative import default_sections, render_section
    return (
        codes_equal, default_sections, diff_positions, encode, explicit_na, mo, pd,
        render_section, vectors_equal,
    )


@app.cell
def _(default_sections, mo, render_section):
    mo.md("\n\n".join(render_section(section) for section in default_sections()))
    return


@app.cell
def _(codes_equal, diff_positions, encode, vectors_equal):
    # edit the values and levels to see where the two vectors disagree
    x = encode(["abc", None, None], levels=["abc", None], treat_null_as_level=True)
    y = encode(["abc", "def", None], levels=["abc", None], treat_null_as_level=True)
    codes_equal(x, y), vectors_equal(x, y), diff_positions(x, y)
    return x, y


@app.cell
def _(explicit_na, vectors_equal, x, y):
    vectors_equal(explicit_na(x), explicit_na(y))
    return


@app.cell
def _(x, y):
    x.to_frame(), y.to_frame()
    return


if __name__ == "__main__":
    app.run()
