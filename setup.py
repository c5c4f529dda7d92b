from setuptools import setup, find_packages

setup(
    name="span_metrics",
    version="0.1.0",
    description="Derive request, latency and status-code metrics from finished tracing spans",
    author="span-metrics contributors",
    packages=find_packages(include=["span_metrics", "span_metrics.*"]),
    install_requires=[
        "prometheus-client>=0.16.0",
        "opentelemetry-api>=1.20.0",
        "opentelemetry-sdk>=1.20.0",
        "opentelemetry-exporter-otlp>=1.20.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
    },
    python_requires=">=3.9",
)
