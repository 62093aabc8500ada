"""StokPro inventory package: calculators, exporters and Streamlit pages."""
