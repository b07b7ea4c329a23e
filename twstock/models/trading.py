from sqlalchemy import Column, Integer, BigInteger, Date, DECIMAL, DateTime, ForeignKey, UniqueConstraint

from twstock.database import Base

# SQLite 只有 INTEGER PRIMARY KEY 會自動遞增
_BigId = BigInteger().with_variant(Integer, "sqlite")


class DailyTradingData(Base):
    """每日交易資料模型"""

    __tablename__ = "daily_trading_data"
    __table_args__ = (
        UniqueConstraint("stock_id", "trade_date", name="uq_trading_stock_date"),
    )

    id = Column(_BigId, primary_key=True, index=True)
    stock_id = Column(Integer, ForeignKey("stocks.id", ondelete="CASCADE"), nullable=False, index=True)
    trade_date = Column(Date, nullable=False, index=True)
    opening_price = Column(DECIMAL(20, 4, asdecimal=False), nullable=False)
    closing_price = Column(DECIMAL(20, 4, asdecimal=False), nullable=False)
    highest_price = Column(DECIMAL(20, 4, asdecimal=False), nullable=False)
    lowest_price = Column(DECIMAL(20, 4, asdecimal=False), nullable=False)
    trading_volume = Column(BigInteger, nullable=False, comment="成交量 (股)")
    trading_value = Column(BigInteger, nullable=False, comment="成交金額 (元)")
    transaction_count = Column(Integer, nullable=False, comment="成交筆數")
    change = Column(DECIMAL(20, 4, asdecimal=False))
    change_percent = Column(DECIMAL(12, 6, asdecimal=False))  # 比率, 0.055 = 5.5%
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<DailyTradingData(stock_id={self.stock_id}, date={self.trade_date}, close={self.closing_price})>"
