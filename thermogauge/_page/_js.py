"""JavaScript poll loop for the gauge page.

Mirrors thermogauge.poller/thermogauge.gauge in the browser: fetch the data
path, validate the body, format to one decimal and color the gauge.
DATA_PATH, POLL_INTERVAL and STATUS_COLORS are defined by the page template.
"""

JS_GAUGE = """
        function updateTemperatureUI(temp, status) {
            const tempValueEl = document.getElementById('temp-value');
            const tempStatusEl = document.getElementById('temp-status');
            const displayCircle = document.getElementById('temp-display');

            tempValueEl.textContent = temp.toFixed(1) + '\\u00b0C';
            tempStatusEl.textContent = status;

            const colorVar = Object.prototype.hasOwnProperty.call(STATUS_COLORS, status)
                ? STATUS_COLORS[status] : undefined;
            if (colorVar === undefined) {
                // Unknown status: keep whatever color is already applied
                console.warn('Unknown status, keeping previous colors:', status);
                return;
            }

            displayCircle.style.borderColor = colorVar;
            displayCircle.style.boxShadow = '0 0 25px ' + colorVar;
            tempStatusEl.style.color = colorVar;
            tempValueEl.style.color = colorVar;
        }

        function parseReading(data) {
            if (data === null || typeof data !== 'object' || Array.isArray(data)) {
                throw new Error('Response body must be a JSON object');
            }
            if (typeof data.status !== 'string') {
                throw new Error('Invalid status: ' + data.status);
            }
            const raw = data.temperature;
            const temp = (typeof raw === 'number' || (typeof raw === 'string' && raw.trim() !== ''))
                ? Number(raw) : NaN;
            if (!Number.isFinite(temp)) {
                throw new Error('Invalid temperature: ' + raw);
            }
            return { temperature: temp, status: data.status };
        }

        function fetchData() {
            fetch(DATA_PATH, { headers: { 'Accept': 'application/json' } })
                .then(response => {
                    if (!response.ok) {
                        throw new Error('HTTP ' + response.status);
                    }
                    return response.json();
                })
                .then(data => {
                    const reading = parseReading(data);
                    updateTemperatureUI(reading.temperature, reading.status);
                })
                .catch(error => console.error('Error fetching data:', error));
        }

        window.onload = () => {
            fetchData();
            setInterval(fetchData, POLL_INTERVAL);
        };
"""
