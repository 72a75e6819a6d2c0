"""CSS styles for the gauge page.

The per-category color variables are generated from StatusCategory so the
page and the Python gauge share one color table.
"""

from ..models import StatusCategory


def _color_variables() -> str:
    return " ".join(f"{category.css_var}: {category.color};" for category in StatusCategory)


CSS_STYLES = """
        :root {
            --bg-color: #1a1a2e;
            --card-color: #16213e;
            --secondary-text: #a7a9be;
            %(colors)s
        }

        body {
            font-family: 'Inter', 'Helvetica Neue', Arial, sans-serif;
            display: flex;
            flex-direction: column;
            align-items: center;
            justify-content: center;
            min-height: 100vh;
            margin: 0;
            padding: 20px;
            color: var(--secondary-text);
            box-sizing: border-box;
            background: linear-gradient(-45deg, #1a1a2e, #16213e, #0f3460, #1a1a2e);
            background-size: 400%% 400%%;
            animation: gradientBG 15s ease infinite;
        }

        @keyframes gradientBG {
            0%% { background-position: 0%% 50%%; }
            50%% { background-position: 100%% 50%%; }
            100%% { background-position: 0%% 50%%; }
        }

        .container {
            width: 100%%;
            max-width: 500px;
            text-align: center;
            background: rgba(0, 0, 0, 0.2);
            padding: 30px;
            border-radius: 20px;
            backdrop-filter: blur(10px);
            border: 1px solid rgba(255, 255, 255, 0.1);
        }

        /* Circular gauge; ring, glow and text colors are set by the poll loop */
        .temp-display {
            width: 250px;
            height: 250px;
            border-radius: 50%%;
            margin: 0 auto 30px;
            display: flex;
            flex-direction: column;
            justify-content: center;
            align-items: center;
            background: radial-gradient(circle, var(--card-color) 60%%, transparent 80%%);
            border: 5px solid;
            transition: border-color 0.5s ease, box-shadow 0.5s ease;
        }

        .temp-value { font-size: 5rem; font-weight: 900; line-height: 1; transition: color 0.5s ease; }
        .temp-status { font-size: 1.5rem; font-weight: 700; margin-top: 10px; transition: color 0.5s ease; }

        .health-key {
            display: flex;
            flex-wrap: wrap;
            justify-content: center;
            gap: 15px;
            margin-top: 30px;
            padding-top: 20px;
            border-top: 1px solid rgba(255, 255, 255, 0.1);
        }
        .key-item { display: flex; align-items: center; gap: 8px; font-size: 0.9rem; }
        .key-color { width: 15px; height: 15px; border-radius: 50%%; }
""" % {"colors": _color_variables()}
