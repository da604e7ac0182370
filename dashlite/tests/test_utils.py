import pandas as pd

from dashlite.utils import df_from_upload, records_from_frame


def test_csv_upload(tmp_path):
    path = tmp_path / 'sales.csv'
    path.write_text('day,region,sales\n2024-01-01,North,10\n\n2024-01-02,,20\n')
    df = df_from_upload(path)
    assert list(df.columns) == ['day', 'region', 'sales']
    assert len(df) == 2
    records = records_from_frame(df)
    assert records[1]['region'] is None


def test_excel_upload(tmp_path):
    path = tmp_path / 'sales.xlsx'
    pd.DataFrame({'a': [1, 2], 'b': ['x', 'y']}).to_excel(path, index=False)
    df = df_from_upload(path)
    assert df['a'].tolist() == [1, 2]


def test_unreadable_upload_returns_none(tmp_path):
    path = tmp_path / 'broken.xlsx'
    path.write_bytes(b'not a workbook')
    assert df_from_upload(path) is None
    assert df_from_upload(None) is None
