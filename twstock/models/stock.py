from sqlalchemy import Column, Integer, String, DateTime

from twstock.database import Base


class Stock(Base):
    """股票基本資料模型"""

    __tablename__ = "stocks"

    id = Column(Integer, primary_key=True, index=True)
    stock_code = Column(String(20), unique=True, nullable=False, index=True)
    stock_name = Column(String(200), nullable=False)
    industry = Column(String(100))  # 半導體, 金融 等
    market_type = Column(String(20))  # 上市, 上櫃
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<Stock(stock_code={self.stock_code}, stock_name={self.stock_name}, market_type={self.market_type})>"
